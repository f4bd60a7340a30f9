import attrs

from src.service.inventory.domain.enum.actor_kind import ActorKind
from src.service.inventory.domain.inventory_errors import MissingActorError


@attrs.frozen
class Actor:
    """Who is asking: a checkout session, a staff member, an import job or a waitlist entry"""

    kind: ActorKind
    id: str

    @classmethod
    def of(cls, *, kind: ActorKind | str | None, id: str | None) -> 'Actor':
        if not kind:
            raise MissingActorError('Actor kind is required')
        if id is None or not str(id).strip():
            raise MissingActorError()
        try:
            actor_kind = ActorKind(kind)
        except ValueError:
            raise MissingActorError(f'Unknown actor kind: {kind}')
        return cls(kind=actor_kind, id=str(id).strip())

    def __str__(self) -> str:
        return f'{self.kind}:{self.id}'
