"""
Sales domain service.
Validates new sales, allocates the aggregate discount over the items and
hands the finished sale to the store in a single call.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Protocol
from uuid import UUID

from ordersvc.domain.sale import NewSale, Sale, SaleFilter, SaleItem
from ordersvc.exceptions import ValidationError
from ordersvc.query.order import OrderBy
from ordersvc.query.page import Page
from ordersvc.services.allocation import allocate, sale_amount
from ordersvc.services.base import BaseService
from ordersvc.types.money import MAX_AMOUNT

logger = logging.getLogger(__name__)


class SaleStorer(Protocol):
    """Persistence behaviour the sales service needs."""

    def new_with_tx(self, tx) -> 'SaleStorer': ...
    def create(self, ctx, sale: Sale) -> None: ...
    def delete(self, ctx, sale: Sale) -> None: ...
    def query(self, ctx, filter: SaleFilter, order_by: OrderBy, page: Page) -> List[Sale]: ...
    def count(self, ctx, filter: SaleFilter) -> int: ...
    def query_by_id(self, ctx, sale_id: UUID) -> Sale: ...


class SaleService(BaseService):
    """Business operations over sales."""

    entity = 'sale'

    def create(self, ctx, new_sale: NewSale) -> Sale:
        """
        Create a sale with its items.

        Steps:
        1. Compute the aggregate amount from quantity x snapshot price
        2. Reject an amount above MAX_AMOUNT or a discount greater than the
           amount (before any store call)
        3. Allocate the discount over the items (first item takes the remainder)
        4. Persist sale + items with one store call

        Raises:
            ValidationError: empty/zero-value sale, oversized total or discount above amount
            StoreError: persistence failed
        """
        ctx.raise_if_done()

        pairs = [(item.quantity, item.price) for item in new_sale.items]
        amount = sale_amount(pairs)
        if amount.value > MAX_AMOUNT:
            raise ValidationError.for_field(
                'items', f'total sale amount[{amount}] is greater than {MAX_AMOUNT}'
            )
        if new_sale.discount > amount:
            raise ValidationError.for_field(
                'discount',
                f'discount[{new_sale.discount}] is greater than total sale amount[{amount}]'
            )

        allocation = allocate(pairs, new_sale.discount)

        now = datetime.now(timezone.utc)
        sale_id = uuid.uuid4()
        items = tuple(
            SaleItem(
                sale_id=sale_id,
                product_id=item.product_id,
                unit_price=item.price,
                quantity=item.quantity,
                amount=line.amount,
                discount=line.discount,
                created_at=now,
                updated_at=now,
            )
            for item, line in zip(new_sale.items, allocation.lines)
        )

        sale = Sale(
            id=sale_id,
            user_id=new_sale.user_id,
            discount=allocation.discount,
            amount=allocation.amount,
            items=items,
            created_at=now,
            updated_at=now,
        )

        with self._store_call(ctx, f'create: sale[{sale.id}]'):
            self._storer.create(ctx, sale)

        logger.info(f"[SALES] Sale {sale.id} created: amount={sale.amount} discount={sale.discount} items={len(items)}")
        return sale

    def delete(self, ctx, sale: Sale) -> None:
        """Remove a sale and its items. Raises NotFoundError if it no longer exists."""
        with self._store_call(ctx, f'delete: sale[{sale.id}]'):
            self._storer.delete(ctx, sale)

        logger.info(f"[SALES] Sale {sale.id} deleted")
