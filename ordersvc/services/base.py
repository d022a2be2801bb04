"""
BaseService - shared plumbing for the per-entity domain services.

A domain service is a thin validation and delegation layer over one
entity's storer. It never commits or rolls back; when rebound with
:meth:`new_with_tx` every store call it makes joins the caller's transaction.
"""
import logging
from contextlib import contextmanager

from ordersvc.exceptions import StoreError
from ordersvc.query.order import OrderBy, QueryVocabulary
from ordersvc.query.page import Page

logger = logging.getLogger(__name__)


class BaseService:
    """Common query operations and transaction rebinding.

    Subclasses set ``entity`` (used in log and error messages) and add their
    own write operations.
    """

    entity = 'entity'

    def __init__(self, storer, vocabulary: QueryVocabulary):
        self._storer = storer
        self._vocabulary = vocabulary

    @property
    def vocabulary(self) -> QueryVocabulary:
        return self._vocabulary

    def new_with_tx(self, tx):
        """Return a new service whose storer uses ``tx``; this instance is untouched."""
        return type(self)(self._storer.new_with_tx(tx), self._vocabulary)

    def parse_order_by(self, raw) -> OrderBy:
        """Parse a "field,DIRECTION" string against this entity's sort vocabulary."""
        return self._vocabulary.parse(raw)

    def query(self, ctx, filter, order_by: OrderBy, page: Page) -> list:
        with self._store_call(ctx, 'query'):
            return self._storer.query(ctx, filter, order_by, page)

    def count(self, ctx, filter) -> int:
        with self._store_call(ctx, 'count'):
            return self._storer.count(ctx, filter)

    def query_by_id(self, ctx, entity_id):
        with self._store_call(ctx, f'querybyid: {self.entity}[{entity_id}]'):
            return self._storer.query_by_id(ctx, entity_id)

    @contextmanager
    def _store_call(self, ctx, operation):
        """Stop if the request is done, and add operation context to store failures."""
        ctx.raise_if_done()
        try:
            yield
        except StoreError as e:
            logger.error(f"[{self.entity.upper()}] {operation} failed: {e.message}")
            raise StoreError(f"{self.entity} {operation}: {e.message}", operation=operation) from e
