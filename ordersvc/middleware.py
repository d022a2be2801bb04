"""Request context, caller identity and request-scoped transactions."""
import logging
import uuid
from functools import wraps

from flask import current_app, g, request
from sqlalchemy.exc import SQLAlchemyError

from ordersvc.blueprints.metrics import transactions_total
from ordersvc.database import begin_transaction, get_session_factory
from ordersvc.exceptions import StoreError, UnauthorizedError
from ordersvc.services.coordinator import bind_to_transaction
from ordersvc.utils.request_context import RequestContext

logger = logging.getLogger(__name__)

SERVICES_KEY = 'ordersvc.services'


def load_request_context():
    """
    Set up per-request state in g.

    g.ctx carries the request deadline; g.user_id is the caller's id from the
    identity header set by the upstream authenticator, or None.
    """
    g.ctx = RequestContext.with_timeout(current_app.config['REQUEST_TIMEOUT_SECONDS'])
    g.user_id = None

    raw = request.headers.get(current_app.config['USER_ID_HEADER'], '').strip()
    if raw:
        try:
            g.user_id = uuid.UUID(raw)
        except ValueError:
            logger.warning(f"[AUTH] Ignoring malformed caller id {raw!r}")


def release_request_context(exception=None):
    """Cancel the request context once the request is torn down."""
    ctx = g.pop('ctx', None)
    if ctx is not None:
        ctx.cancel()


def require_user(f):
    """Decorator: reject the request with 401 when no caller identity was given."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('user_id') is None:
            raise UnauthorizedError('Caller identity required')
        return f(*args, **kwargs)
    return decorated_function


def transactional(f):
    """
    Decorator: run the view inside one database transaction.

    The transaction is exposed as g.tx and a bundle of services bound to it
    as g.tx_services. It commits when the view returns and rolls back when
    the view raises; the exception is re-raised.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        tx = begin_transaction(get_session_factory())
        g.tx = tx
        g.tx_services = bind_to_transaction(get_services(), tx)
        logger.debug(f"[TX] BEGIN {request.method} {request.path}")

        try:
            result = f(*args, **kwargs)
        except Exception as e:
            tx.rollback()
            transactions_total.labels(outcome='rollback').inc()
            logger.info(f"[TX] ROLLBACK {request.method} {request.path}: {type(e).__name__}")
            raise
        else:
            try:
                tx.commit()
            except SQLAlchemyError as e:
                transactions_total.labels(outcome='rollback').inc()
                logger.error(f"[TX] COMMIT failed {request.method} {request.path}: {e}")
                raise StoreError(f"commit: {e}", operation='commit') from e
            transactions_total.labels(outcome='commit').inc()
            logger.debug(f"[TX] COMMIT {request.method} {request.path}")
            return result
        finally:
            g.pop('tx', None)
            g.pop('tx_services', None)
    return decorated_function


def get_services():
    """The application's non-transactional service bundle."""
    return current_app.extensions[SERVICES_KEY]


def get_tx_services():
    """The service bundle bound to the current request's transaction."""
    return g.tx_services
