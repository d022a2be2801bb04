"""Helpers for turning query-string and JSON values into domain values."""
import uuid
from datetime import datetime, timezone

from ordersvc.exceptions import ValidationError
from ordersvc.query.page import Page
from ordersvc.types.money import Money
from ordersvc.types.unset import UNSET


def parse_page(args) -> Page:
    try:
        return Page.parse(args.get('page'), args.get('rows'))
    except ValueError as e:
        raise ValidationError.for_field('page', str(e))


def parse_order_by(service, args):
    try:
        return service.parse_order_by(args.get('orderBy'))
    except ValueError as e:
        raise ValidationError.for_field('order', str(e))


def parse_uuid(raw, field):
    """UUID from text; raises ValidationError tagged with ``field``."""
    try:
        return uuid.UUID(str(raw).strip())
    except (TypeError, ValueError, AttributeError):
        raise ValidationError.for_field(field, f'invalid id {raw!r}')


def optional_uuid(args, name):
    raw = args.get(name, '').strip()
    return parse_uuid(raw, name) if raw else UNSET


def optional_uuid_list(args, name):
    """Comma separated ids; blank entries are ignored."""
    raw = args.get(name, '').strip()
    if not raw:
        return UNSET
    ids = [parse_uuid(part, name) for part in raw.split(',') if part.strip()]
    return tuple(ids) if ids else UNSET


def optional_text(args, name):
    raw = args.get(name, '').strip()
    return raw if raw else UNSET


def optional_money(args, name):
    raw = args.get(name, '').strip()
    return Money.parse(raw, field=name) if raw else UNSET


def optional_datetime(args, name):
    raw = args.get(name, '').strip()
    return parse_datetime(raw, name) if raw else UNSET


def parse_datetime(raw, field) -> datetime:
    """
    Parse an RFC 3339 / ISO 8601 timestamp into an aware UTC datetime.

    Values without an offset are taken as UTC.
    """
    text = raw.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        value = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError.for_field(field, f'invalid timestamp {raw!r}')
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_datetime(value: datetime) -> str:
    """RFC 3339 text for a stored timestamp (naive values are UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='seconds').replace('+00:00', 'Z')


def get_json_body(request) -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload
