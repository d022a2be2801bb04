"""User domain service."""
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Protocol
from uuid import UUID

from werkzeug.security import check_password_hash, generate_password_hash

from ordersvc.domain.user import NewUser, UpdateUser, User, UserFilter
from ordersvc.exceptions import UnauthorizedError, ValidationError
from ordersvc.query.order import OrderBy
from ordersvc.query.page import Page
from ordersvc.services.base import BaseService
from ordersvc.types.unset import is_set

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 6


class UserStorer(Protocol):
    """Persistence behaviour the user service needs."""

    def new_with_tx(self, tx) -> 'UserStorer': ...
    def create(self, ctx, user: User) -> None: ...
    def update(self, ctx, user: User) -> None: ...
    def delete(self, ctx, user: User) -> None: ...
    def query(self, ctx, filter: UserFilter, order_by: OrderBy, page: Page) -> List[User]: ...
    def count(self, ctx, filter: UserFilter) -> int: ...
    def query_by_id(self, ctx, user_id: UUID) -> User: ...
    def query_by_email(self, ctx, email: str) -> User: ...


def hash_password(password: str) -> str:
    """Hash a plain password (scrypt)."""
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError.for_field(
            'password', f'must be at least {PASSWORD_MIN_LENGTH} characters'
        )
    return generate_password_hash(password, method='scrypt')


class UserService(BaseService):
    """Business operations over users."""

    entity = 'user'

    def create(self, ctx, new_user: NewUser) -> User:
        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4(),
            name=new_user.name,
            email=new_user.email,
            roles=tuple(new_user.roles),
            password_hash=hash_password(new_user.password),
            enabled=True,
            created_at=now,
            updated_at=now,
        )

        with self._store_call(ctx, f'create: user[{user.id}]'):
            self._storer.create(ctx, user)

        logger.info(f"[USERS] User {user.id} created")
        return user

    def update(self, ctx, user: User, update: UpdateUser) -> User:
        changes = {}
        if is_set(update.name):
            changes['name'] = update.name
        if is_set(update.email):
            changes['email'] = update.email
        if is_set(update.roles):
            changes['roles'] = tuple(update.roles)
        if is_set(update.password):
            changes['password_hash'] = hash_password(update.password)
        if is_set(update.enabled):
            changes['enabled'] = bool(update.enabled)
        changes['updated_at'] = datetime.now(timezone.utc)

        updated = replace(user, **changes)

        with self._store_call(ctx, f'update: user[{user.id}]'):
            self._storer.update(ctx, updated)

        return updated

    def delete(self, ctx, user: User) -> None:
        with self._store_call(ctx, f'delete: user[{user.id}]'):
            self._storer.delete(ctx, user)

        logger.info(f"[USERS] User {user.id} deleted")

    def query_by_email(self, ctx, email: str) -> User:
        with self._store_call(ctx, f'querybyemail: user[{email}]'):
            return self._storer.query_by_email(ctx, email)

    def authenticate(self, ctx, email: str, password: str) -> User:
        """
        Check an email/password pair.

        Raises:
            NotFoundError: no user with that email
            UnauthorizedError: wrong password or disabled user
        """
        user = self.query_by_email(ctx, email)

        if not user.enabled:
            raise UnauthorizedError('User is disabled')
        if not check_password_hash(user.password_hash, password):
            raise UnauthorizedError('Invalid credentials')

        return user
