"""Database configuration, initialization and transaction handles."""
import enum
import logging
import threading

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ordersvc.exceptions import TransactionClosedError

logger = logging.getLogger(__name__)

# Create SQLAlchemy base
Base = declarative_base()

EXTENSION_KEY = 'ordersvc.db'


def create_db_engine(database_uri, echo=False, pool_size=10, max_overflow=20):
    """Build the engine with pool settings suited to the backend."""
    if database_uri.startswith('sqlite'):
        options = {'connect_args': {'check_same_thread': False}}
        if ':memory:' in database_uri or database_uri in ('sqlite://', 'sqlite+pysqlite://'):
            # One shared connection, otherwise every session sees an empty database
            options['poolclass'] = StaticPool
        engine = create_engine(database_uri, echo=echo, **options)
        event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        database_uri,
        echo=echo,
        pool_pre_ping=True,  # Enable connection health checks
        pool_size=pool_size,
        max_overflow=max_overflow
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY constraints unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def init_db(app):
    """Initialize database connection and register the session factory on the app."""
    engine = create_db_engine(
        app.config['SQLALCHEMY_DATABASE_URI'],
        echo=app.config.get('SQLALCHEMY_ECHO', False),
        pool_size=app.config.get('DB_POOL_SIZE', 10),
        max_overflow=app.config.get('DB_MAX_OVERFLOW', 20)
    )
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    app.extensions[EXTENSION_KEY] = session_factory

    # Register teardown
    @app.teardown_appcontext
    def release_transaction(exception=None):
        """Roll back a transaction a view left open."""
        from flask import g
        tx = g.pop('tx', None)
        if tx is not None and not tx.closed:
            logger.warning("[TX] Transaction left open at teardown, rolling back")
            tx.rollback()

    return session_factory


def get_session_factory(app=None):
    """Get the session factory registered on the (current) app."""
    if app is None:
        from flask import current_app
        app = current_app
    return app.extensions[EXTENSION_KEY]


def create_all(session_factory):
    """Create every table known to the models package."""
    import ordersvc.models  # noqa: F401  (register tables on Base.metadata)
    Base.metadata.create_all(session_factory.kw['bind'])


class TransactionState(enum.Enum):
    """Lifecycle of one request's unit of work."""
    OPENED = 'OPENED'
    WORKING = 'WORKING'
    COMMITTED = 'COMMITTED'
    ROLLED_BACK = 'ROLLED_BACK'


class Transaction:
    """Handle for one atomic unit of work over a single SQLAlchemy session.

    Owned by whoever began it (the request-scoping middleware); stores only
    borrow ``session``. Only the owner commits or rolls back. Any use after
    COMMITTED/ROLLED_BACK, or from another thread, raises
    TransactionClosedError.
    """

    def __init__(self, session):
        self._session = session
        self._state = TransactionState.OPENED
        self._owner = threading.get_ident()

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state in (TransactionState.COMMITTED, TransactionState.ROLLED_BACK)

    @property
    def session(self):
        self._check_usable('use')
        if self._state is TransactionState.OPENED:
            self._state = TransactionState.WORKING
        return self._session

    def commit(self):
        self._check_usable('commit')
        try:
            self._session.commit()
            self._state = TransactionState.COMMITTED
        except Exception:
            self._session.rollback()
            self._state = TransactionState.ROLLED_BACK
            raise
        finally:
            self._session.close()

    def rollback(self):
        self._check_usable('rollback')
        try:
            self._session.rollback()
        finally:
            self._state = TransactionState.ROLLED_BACK
            self._session.close()

    def _check_usable(self, action):
        if self.closed:
            raise TransactionClosedError(f"cannot {action} transaction: already {self._state.value}")
        if threading.get_ident() != self._owner:
            raise TransactionClosedError(f"cannot {action} transaction from a thread that does not own it")

    def __repr__(self):
        return f"<Transaction(state={self._state.value})>"


def begin_transaction(session_factory) -> Transaction:
    """Open a session, start a transaction on it and return its handle."""
    session = session_factory()
    session.begin()
    return Transaction(session)
