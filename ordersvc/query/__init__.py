"""Entity-agnostic filter/order/page query model."""
from ordersvc.query.order import ASC, DESC, OrderBy, QueryVocabulary
from ordersvc.query.page import DEFAULT_ROWS, MAX_ROWS, Page
from ordersvc.query.result import QueryResult

__all__ = [
    'ASC', 'DESC', 'OrderBy', 'QueryVocabulary',
    'DEFAULT_ROWS', 'MAX_ROWS', 'Page', 'QueryResult',
]
