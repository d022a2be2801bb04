"""User domain types."""
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple
from uuid import UUID

from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.types.unset import UNSET

ORDER_BY_ID = 'id'
ORDER_BY_NAME = 'name'
ORDER_BY_EMAIL = 'email'
ORDER_BY_ENABLED = 'enabled'


@dataclass(frozen=True)
class User:
    id: UUID
    name: Name
    email: str
    roles: Tuple[Role, ...]
    password_hash: str
    enabled: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewUser:
    name: Name
    email: str
    roles: Tuple[Role, ...]
    password: str


@dataclass(frozen=True)
class UpdateUser:
    name: object = UNSET
    email: object = UNSET
    roles: object = UNSET
    password: object = UNSET
    enabled: object = UNSET


@dataclass(frozen=True)
class UserFilter:
    id: object = UNSET
    name: object = UNSET
    email: object = UNSET
    start_created_date: object = UNSET
    end_created_date: object = UNSET
