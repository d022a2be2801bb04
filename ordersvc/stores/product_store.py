"""SQLAlchemy store for products."""
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ordersvc.domain import product as product_domain
from ordersvc.domain.product import Product
from ordersvc.exceptions import NotFoundError, ValidationError
from ordersvc.models import ProductRow
from ordersvc.stores.base import BaseStore, to_money
from ordersvc.types.name import Name
from ordersvc.types.unset import is_set


class ProductStore(BaseStore):
    """Manages product persistence."""

    name = 'productdb'
    order_columns = {
        product_domain.ORDER_BY_ID: ProductRow.id,
        product_domain.ORDER_BY_NAME: ProductRow.name,
        product_domain.ORDER_BY_PRICE: ProductRow.price,
    }

    def create(self, ctx, product: Product) -> None:
        with self._session(ctx, 'create') as session:
            session.add(ProductRow(
                id=product.id,
                name=str(product.name),
                price=product.price.value,
                created_at=product.created_at,
                updated_at=product.updated_at,
            ))

    def update(self, ctx, product: Product) -> None:
        with self._session(ctx, 'update') as session:
            row = session.get(ProductRow, product.id)
            if row is None:
                raise NotFoundError(f'Product {product.id} not found')
            row.name = str(product.name)
            row.price = product.price.value
            row.updated_at = product.updated_at

    def delete(self, ctx, product: Product) -> None:
        with self._session(ctx, 'delete') as session:
            row = session.get(ProductRow, product.id)
            if row is None:
                raise NotFoundError(f'Product {product.id} not found')
            session.delete(row)
            try:
                session.flush()
            except IntegrityError:
                raise ValidationError.for_field('product_id', 'product is referenced by sales')

    def query(self, ctx, filter, order_by, page) -> list:
        stmt = (_apply_filter(select(ProductRow), filter)
                .order_by(self._order_clause(order_by), ProductRow.id)
                .offset(page.offset)
                .limit(page.rows_per_page))

        with self._session(ctx, 'query') as session:
            return [_to_product(row) for row in session.execute(stmt).scalars().all()]

    def count(self, ctx, filter) -> int:
        stmt = _apply_filter(select(func.count(ProductRow.id)), filter)

        with self._session(ctx, 'count') as session:
            return session.execute(stmt).scalar_one()

    def query_by_id(self, ctx, product_id) -> Product:
        with self._session(ctx, 'querybyid') as session:
            row = session.get(ProductRow, product_id)
            if row is None:
                raise NotFoundError(f'Product {product_id} not found')
            return _to_product(row)

    def query_by_ids(self, ctx, product_ids) -> list:
        stmt = select(ProductRow).where(ProductRow.id.in_(list(product_ids))).order_by(ProductRow.id)

        with self._session(ctx, 'querybyids') as session:
            return [_to_product(row) for row in session.execute(stmt).scalars().all()]


def _apply_filter(stmt, filter):
    if filter is None:
        return stmt
    if is_set(filter.id):
        stmt = stmt.where(ProductRow.id == filter.id)
    if is_set(filter.ids):
        stmt = stmt.where(ProductRow.id.in_(list(filter.ids)))
    if is_set(filter.name):
        stmt = stmt.where(func.lower(ProductRow.name).like(f'%{str(filter.name).lower()}%'))
    if is_set(filter.price):
        stmt = stmt.where(ProductRow.price == filter.price.value)
    return stmt


def _to_product(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=Name(row.name),
        price=to_money(row.price, 'price'),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
