"""Paging of query results."""
from dataclasses import dataclass

DEFAULT_ROWS = 10
MAX_ROWS = 100


@dataclass(frozen=True)
class Page:
    """One page of results: a 1-based page number and a bounded row count."""
    number: int = 1
    rows_per_page: int = DEFAULT_ROWS

    def __post_init__(self):
        if self.number < 1:
            raise ValueError('page value too small, must be larger than 0')
        if self.rows_per_page < 1:
            raise ValueError('rows value too small, must be larger than 0')
        if self.rows_per_page > MAX_ROWS:
            raise ValueError(f'rows value too large, must be {MAX_ROWS} or less')

    @classmethod
    def parse(cls, page=None, rows=None) -> 'Page':
        """Build a Page from optional textual query parameters.

        Missing page defaults to 1 and missing rows to DEFAULT_ROWS. Rows
        above MAX_ROWS is rejected, not clamped.
        """
        number = _to_int(page, 1, 'page')
        rows_per_page = _to_int(rows, DEFAULT_ROWS, 'rows')
        return cls(number, rows_per_page)

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.rows_per_page


def _to_int(raw, default, label):
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValueError(f'{label} conversion: {raw!r} is not an integer')
