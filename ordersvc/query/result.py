"""Paged query responses."""
from dataclasses import dataclass
from typing import Any, List

from ordersvc.query.page import Page


@dataclass(frozen=True)
class QueryResult:
    items: List[Any]
    total: int
    page: Page

    def to_dict(self):
        return {
            'items': self.items,
            'total': self.total,
            'page': self.page.number,
            'rowsPerPage': self.page.rows_per_page,
        }
