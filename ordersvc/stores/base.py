"""Shared session handling for the SQLAlchemy stores."""
import logging
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ordersvc.exceptions import RequestCancelledError, StoreError
from ordersvc.types.money import Money

logger = logging.getLogger(__name__)


class BaseStore:
    """
    A store either runs every call in its own short transaction, or, once
    rebound with :meth:`new_with_tx`, inside the caller's transaction.

    Bound stores only flush; commit and rollback belong to the transaction
    owner.
    """

    name = 'store'
    order_columns = {}

    def __init__(self, session_factory, tx=None):
        self._session_factory = session_factory
        self._tx = tx

    def new_with_tx(self, tx):
        """Return a new store using ``tx``; this instance keeps its own sessions."""
        return type(self)(self._session_factory, tx)

    @property
    def in_transaction(self) -> bool:
        return self._tx is not None

    @contextmanager
    def _session(self, ctx, operation):
        ctx.raise_if_done()
        try:
            if self._tx is not None:
                session = self._tx.session
                _apply_deadline(session, ctx)
                yield session
                session.flush()
            else:
                with self._session_factory() as session:
                    with session.begin():
                        _apply_deadline(session, ctx)
                        yield session
        except SQLAlchemyError as e:
            if ctx.done:
                logger.warning(f"[STORE] {self.name}.{operation} stopped by request deadline: {e}")
                raise RequestCancelledError('Request deadline exceeded') from e
            logger.error(f"[STORE] {self.name}.{operation} failed: {e}")
            raise StoreError(f"{self.name}.{operation}: {e}", operation=operation) from e

    def _order_clause(self, order_by):
        column = self.order_columns.get(order_by.field)
        if column is None:
            raise StoreError(f"{self.name}: field {order_by.field!r} does not exist", operation='order')
        return column.desc() if order_by.direction == 'DESC' else column.asc()


def statement_timeout_ms(remaining):
    """Milliseconds for statement_timeout; never 0, which PostgreSQL reads as no limit."""
    return max(1, int(remaining * 1000))


def _apply_deadline(session, ctx):
    # Only PostgreSQL supports a per-transaction statement timeout
    remaining = ctx.remaining()
    if remaining is None or session.get_bind().dialect.name != 'postgresql':
        return
    session.execute(
        text("SELECT set_config('statement_timeout', :timeout, true)"),
        {'timeout': str(statement_timeout_ms(remaining))},
    )


def to_money(value, field):
    """Money from a Numeric column value."""
    return Money.parse(value, field=field, allow_negative=True)
