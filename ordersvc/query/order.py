"""Result ordering and per-entity sort vocabularies."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

ASC = 'ASC'
DESC = 'DESC'

DIRECTIONS = (ASC, DESC)


@dataclass(frozen=True)
class OrderBy:
    """Field to sort on (an internal field key) and direction."""
    field: str
    direction: str = ASC

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise ValueError(f'unknown direction: {self.direction}')

    @classmethod
    def parse(cls, allow_list: Mapping[str, str], raw, default: 'OrderBy') -> 'OrderBy':
        """Parse "field" or "field,DIRECTION" against a public-name allow-list.

        The allow-list maps public field names to internal field keys. Blank
        input yields ``default``.
        """
        if raw is None or not str(raw).strip():
            return default

        parts = [p.strip() for p in str(raw).split(',')]
        public_name = parts[0]
        if public_name not in allow_list:
            raise ValueError(f'unknown order: {public_name}')
        internal = allow_list[public_name]

        if len(parts) == 1:
            return cls(internal, ASC)
        if len(parts) == 2:
            direction = parts[1].upper()
            if direction not in DIRECTIONS:
                raise ValueError(f'unknown direction: {parts[1]}')
            return cls(internal, direction)

        raise ValueError(f'unknown order: {raw}')


@dataclass(frozen=True)
class QueryVocabulary:
    """Sortable public field names for one entity, plus its default order.

    Built once at startup and handed to the domain service that uses it.
    """
    fields: Mapping[str, str]
    default: OrderBy = None

    def __post_init__(self):
        # Freeze a private copy so nobody mutates the allow-list after startup
        object.__setattr__(self, 'fields', MappingProxyType(dict(self.fields)))
        if self.default is None:
            raise ValueError('a default order is required')
        if self.default.field not in self.fields.values():
            raise ValueError(f'default order field {self.default.field!r} is not sortable')

    def parse(self, raw) -> OrderBy:
        return OrderBy.parse(self.fields, raw, self.default)
