"""Sale domain types."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple
from uuid import UUID

from ordersvc.types.money import Money
from ordersvc.types.unset import UNSET

# Internal sort keys understood by sale stores
ORDER_BY_ID = 'id'
ORDER_BY_AMOUNT = 'amount'
ORDER_BY_DISCOUNT = 'discount'
ORDER_BY_CREATED_AT = 'created_at'


@dataclass(frozen=True)
class SaleItem:
    sale_id: UUID
    product_id: UUID
    unit_price: Money
    quantity: int
    amount: Money
    discount: Money
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Sale:
    """A confirmed sale.

    ``amount`` and ``discount`` always equal the sums over ``items``.
    """
    id: UUID
    user_id: UUID
    discount: Money
    amount: Money
    items: Tuple[SaleItem, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewSaleItem:
    """A line requested by the caller; ``price`` is the product's price at sale time."""
    product_id: UUID
    quantity: int
    price: Money


@dataclass(frozen=True)
class NewSale:
    user_id: UUID
    discount: Money
    items: Tuple[NewSaleItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SaleFilter:
    """Optional constraints for sale queries; UNSET fields do not constrain."""
    id: object = UNSET
    user_id: object = UNSET
    start_created_date: object = UNSET
    end_created_date: object = UNSET
