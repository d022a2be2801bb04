"""Product domain types."""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from ordersvc.types.money import Money
from ordersvc.types.name import Name
from ordersvc.types.unset import UNSET

ORDER_BY_ID = 'id'
ORDER_BY_NAME = 'name'
ORDER_BY_PRICE = 'price'


@dataclass(frozen=True)
class Product:
    id: UUID
    name: Name
    price: Money
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewProduct:
    name: Name
    price: Money


@dataclass(frozen=True)
class UpdateProduct:
    """Fields to change; anything left UNSET keeps its current value."""
    name: object = UNSET
    price: object = UNSET


@dataclass(frozen=True)
class ProductFilter:
    id: object = UNSET
    ids: object = UNSET
    name: object = UNSET  # substring match
    price: object = UNSET
