"""Validated display names for users and products."""
from ordersvc.exceptions import ValidationError

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50


class Name(str):
    """A trimmed name between NAME_MIN_LENGTH and NAME_MAX_LENGTH characters."""

    @classmethod
    def parse(cls, raw, field: str = 'name') -> 'Name':
        if not isinstance(raw, str):
            raise ValidationError.for_field(field, 'must be text')
        cleaned = ' '.join(raw.split())
        if not NAME_MIN_LENGTH <= len(cleaned) <= NAME_MAX_LENGTH:
            raise ValidationError.for_field(
                field,
                f'must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters'
            )
        return cls(cleaned)
