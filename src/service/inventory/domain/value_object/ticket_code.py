import secrets


# Crockford base32: no I, L, O, U to keep codes readable at the door
TICKET_CODE_ALPHABET = '0123456789ABCDEFGHJKMNPQRSTVWXYZ'
TICKET_CODE_PREFIX = 'TKT-'
TICKET_CODE_LENGTH = 12  # 60 random bits


def generate_ticket_code() -> str:
    body = ''.join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(TICKET_CODE_LENGTH))
    return f'{TICKET_CODE_PREFIX}{body}'


def normalize_ticket_code(code: str) -> str:
    return code.strip().upper()
