"""User roles."""
import enum

from ordersvc.exceptions import ValidationError


class Role(str, enum.Enum):
    """Role granted to a user."""
    ADMIN = 'ADMIN'
    USER = 'USER'

    @classmethod
    def parse(cls, raw, field: str = 'roles') -> 'Role':
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            raise ValidationError.for_field(field, f'unknown role {raw!r}')

    @classmethod
    def parse_many(cls, raws, field: str = 'roles') -> tuple:
        if not raws:
            raise ValidationError.for_field(field, 'at least one role is required')
        # Keep caller order, drop duplicates
        return tuple(dict.fromkeys(cls.parse(r, field) for r in raws))
