"""Email address validation."""
import re

from ordersvc.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def parse_email(raw, field: str = 'email') -> str:
    """Return the normalized (lower-cased, trimmed) address or raise ValidationError."""
    if not isinstance(raw, str) or not EMAIL_PATTERN.match(raw.strip()):
        raise ValidationError.for_field(field, 'invalid email address')
    return raw.strip().lower()
