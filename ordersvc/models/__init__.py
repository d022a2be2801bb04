"""Models package - exports all SQLAlchemy models."""
from ordersvc.models.user import UserRow
from ordersvc.models.product import ProductRow
from ordersvc.models.sale import SaleRow
from ordersvc.models.sale_item import SaleItemRow

__all__ = ['UserRow', 'ProductRow', 'SaleRow', 'SaleItemRow']
