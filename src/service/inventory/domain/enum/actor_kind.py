from enum import StrEnum


class ActorKind(StrEnum):
    BUYER_SESSION = 'buyer_session'
    STAFF = 'staff'
    GUEST_IMPORT = 'guest_import'
    WAITLIST = 'waitlist'
