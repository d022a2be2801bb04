"""SQLAlchemy store for users."""
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ordersvc.domain import user as user_domain
from ordersvc.domain.user import User
from ordersvc.exceptions import NotFoundError, ValidationError
from ordersvc.models import UserRow
from ordersvc.stores.base import BaseStore
from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.types.unset import is_set


class UserStore(BaseStore):
    """Manages user persistence."""

    name = 'userdb'
    order_columns = {
        user_domain.ORDER_BY_ID: UserRow.id,
        user_domain.ORDER_BY_NAME: UserRow.name,
        user_domain.ORDER_BY_EMAIL: UserRow.email,
        user_domain.ORDER_BY_ENABLED: UserRow.enabled,
    }

    def create(self, ctx, user: User) -> None:
        with self._session(ctx, 'create') as session:
            row = UserRow(id=user.id)
            _copy_to_row(user, row)
            row.created_at = user.created_at
            session.add(row)
            _flush_unique_email(session)

    def update(self, ctx, user: User) -> None:
        with self._session(ctx, 'update') as session:
            row = session.get(UserRow, user.id)
            if row is None:
                raise NotFoundError(f'User {user.id} not found')
            _copy_to_row(user, row)
            _flush_unique_email(session)

    def delete(self, ctx, user: User) -> None:
        with self._session(ctx, 'delete') as session:
            row = session.get(UserRow, user.id)
            if row is None:
                raise NotFoundError(f'User {user.id} not found')
            session.delete(row)
            try:
                session.flush()
            except IntegrityError:
                raise ValidationError.for_field('user_id', 'user still has sales')

    def query(self, ctx, filter, order_by, page) -> list:
        stmt = (_apply_filter(select(UserRow), filter)
                .order_by(self._order_clause(order_by), UserRow.id)
                .offset(page.offset)
                .limit(page.rows_per_page))

        with self._session(ctx, 'query') as session:
            return [_to_user(row) for row in session.execute(stmt).scalars().all()]

    def count(self, ctx, filter) -> int:
        stmt = _apply_filter(select(func.count(UserRow.id)), filter)

        with self._session(ctx, 'count') as session:
            return session.execute(stmt).scalar_one()

    def query_by_id(self, ctx, user_id) -> User:
        with self._session(ctx, 'querybyid') as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise NotFoundError(f'User {user_id} not found')
            return _to_user(row)

    def query_by_email(self, ctx, email) -> User:
        stmt = select(UserRow).where(UserRow.email == email.lower())

        with self._session(ctx, 'querybyemail') as session:
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                raise NotFoundError(f'User with email {email} not found')
            return _to_user(row)


def _flush_unique_email(session):
    # Duplicate emails surface as a field error instead of a store failure
    try:
        session.flush()
    except IntegrityError:
        raise ValidationError.for_field('email', 'email already in use')


def _apply_filter(stmt, filter):
    if filter is None:
        return stmt
    if is_set(filter.id):
        stmt = stmt.where(UserRow.id == filter.id)
    if is_set(filter.name):
        stmt = stmt.where(func.lower(UserRow.name).like(f'%{str(filter.name).lower()}%'))
    if is_set(filter.email):
        stmt = stmt.where(UserRow.email == filter.email)
    if is_set(filter.start_created_date):
        stmt = stmt.where(UserRow.created_at >= filter.start_created_date)
    if is_set(filter.end_created_date):
        stmt = stmt.where(UserRow.created_at <= filter.end_created_date)
    return stmt


def _copy_to_row(user: User, row: UserRow):
    row.name = str(user.name)
    row.email = user.email
    row.roles = ','.join(role.value for role in user.roles)
    row.password_hash = user.password_hash
    row.enabled = user.enabled
    row.updated_at = user.updated_at


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=Name(row.name),
        email=row.email,
        roles=tuple(Role(r) for r in row.roles.split(',') if r),
        password_hash=row.password_hash,
        enabled=row.enabled,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
