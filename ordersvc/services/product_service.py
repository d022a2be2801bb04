"""Product domain service."""
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Protocol, Sequence
from uuid import UUID

from ordersvc.domain.product import NewProduct, Product, ProductFilter, UpdateProduct
from ordersvc.query.order import OrderBy
from ordersvc.query.page import Page
from ordersvc.services.base import BaseService
from ordersvc.types.unset import is_set

logger = logging.getLogger(__name__)


class ProductStorer(Protocol):
    """Persistence behaviour the product service needs."""

    def new_with_tx(self, tx) -> 'ProductStorer': ...
    def create(self, ctx, product: Product) -> None: ...
    def update(self, ctx, product: Product) -> None: ...
    def delete(self, ctx, product: Product) -> None: ...
    def query(self, ctx, filter: ProductFilter, order_by: OrderBy, page: Page) -> List[Product]: ...
    def count(self, ctx, filter: ProductFilter) -> int: ...
    def query_by_id(self, ctx, product_id: UUID) -> Product: ...
    def query_by_ids(self, ctx, product_ids: Sequence[UUID]) -> List[Product]: ...


class ProductService(BaseService):
    """Business operations over products."""

    entity = 'product'

    def create(self, ctx, new_product: NewProduct) -> Product:
        now = datetime.now(timezone.utc)
        product = Product(
            id=uuid.uuid4(),
            name=new_product.name,
            price=new_product.price,
            created_at=now,
            updated_at=now,
        )

        with self._store_call(ctx, f'create: product[{product.id}]'):
            self._storer.create(ctx, product)

        logger.info(f"[PRODUCTS] Product {product.id} created")
        return product

    def update(self, ctx, product: Product, update: UpdateProduct) -> Product:
        """Apply the provided fields of ``update`` and persist the result."""
        changes = {}
        if is_set(update.name):
            changes['name'] = update.name
        if is_set(update.price):
            changes['price'] = update.price
        changes['updated_at'] = datetime.now(timezone.utc)

        updated = replace(product, **changes)

        with self._store_call(ctx, f'update: product[{product.id}]'):
            self._storer.update(ctx, updated)

        return updated

    def delete(self, ctx, product: Product) -> None:
        with self._store_call(ctx, f'delete: product[{product.id}]'):
            self._storer.delete(ctx, product)

        logger.info(f"[PRODUCTS] Product {product.id} deleted")

    def query_by_ids(self, ctx, product_ids: Sequence[UUID]) -> List[Product]:
        """Products for the given ids; ids with no product are simply absent."""
        if not product_ids:
            return []
        with self._store_call(ctx, 'querybyids'):
            return self._storer.query_by_ids(ctx, list(dict.fromkeys(product_ids)))
