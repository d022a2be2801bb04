"""SQLAlchemy store for sales and their items."""
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from ordersvc.domain import sale as sale_domain
from ordersvc.domain.sale import Sale, SaleItem
from ordersvc.exceptions import NotFoundError
from ordersvc.models import SaleItemRow, SaleRow
from ordersvc.stores.base import BaseStore, to_money
from ordersvc.types.unset import is_set


class SaleStore(BaseStore):
    """Manages sale persistence. Sale and items are always written together."""

    name = 'saledb'
    order_columns = {
        sale_domain.ORDER_BY_ID: SaleRow.id,
        sale_domain.ORDER_BY_AMOUNT: SaleRow.amount,
        sale_domain.ORDER_BY_DISCOUNT: SaleRow.discount,
        sale_domain.ORDER_BY_CREATED_AT: SaleRow.created_at,
    }

    def create(self, ctx, sale: Sale) -> None:
        with self._session(ctx, 'create') as session:
            session.add(_to_row(sale))

    def delete(self, ctx, sale: Sale) -> None:
        with self._session(ctx, 'delete') as session:
            row = session.get(SaleRow, sale.id)
            if row is None:
                raise NotFoundError(f'Sale {sale.id} not found')
            # Items go with it (delete-orphan cascade)
            session.delete(row)

    def query(self, ctx, filter, order_by, page) -> list:
        stmt = _apply_filter(select(SaleRow), filter)
        stmt = (stmt.options(selectinload(SaleRow.items))
                .order_by(self._order_clause(order_by), SaleRow.id)
                .offset(page.offset)
                .limit(page.rows_per_page))

        with self._session(ctx, 'query') as session:
            rows = session.execute(stmt).scalars().all()
            return [_to_sale(row) for row in rows]

    def count(self, ctx, filter) -> int:
        stmt = _apply_filter(select(func.count(SaleRow.id)), filter)

        with self._session(ctx, 'count') as session:
            return session.execute(stmt).scalar_one()

    def query_by_id(self, ctx, sale_id) -> Sale:
        stmt = select(SaleRow).options(selectinload(SaleRow.items)).where(SaleRow.id == sale_id)

        with self._session(ctx, 'querybyid') as session:
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                raise NotFoundError(f'Sale {sale_id} not found')
            return _to_sale(row)


def _apply_filter(stmt, filter):
    if filter is None:
        return stmt
    if is_set(filter.id):
        stmt = stmt.where(SaleRow.id == filter.id)
    if is_set(filter.user_id):
        stmt = stmt.where(SaleRow.user_id == filter.user_id)
    if is_set(filter.start_created_date):
        stmt = stmt.where(SaleRow.created_at >= filter.start_created_date)
    if is_set(filter.end_created_date):
        stmt = stmt.where(SaleRow.created_at <= filter.end_created_date)
    return stmt


def _to_row(sale: Sale) -> SaleRow:
    return SaleRow(
        id=sale.id,
        user_id=sale.user_id,
        discount=sale.discount.value,
        amount=sale.amount.value,
        created_at=sale.created_at,
        updated_at=sale.updated_at,
        items=[
            SaleItemRow(
                position=position,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price.value,
                amount=item.amount.value,
                discount=item.discount.value,
                created_at=item.created_at,
                updated_at=item.updated_at,
            )
            for position, item in enumerate(sale.items)
        ],
    )


def _to_sale(row: SaleRow) -> Sale:
    items = tuple(
        SaleItem(
            sale_id=row.id,
            product_id=item.product_id,
            unit_price=to_money(item.unit_price, 'unit_price'),
            quantity=item.quantity,
            amount=to_money(item.amount, 'amount'),
            discount=to_money(item.discount, 'discount'),
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
        for item in row.items
    )
    return Sale(
        id=row.id,
        user_id=row.user_id,
        discount=to_money(row.discount, 'discount'),
        amount=to_money(row.amount, 'amount'),
        items=items,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
