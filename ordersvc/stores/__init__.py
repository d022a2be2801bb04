"""SQLAlchemy implementations of the domain storer contracts."""
from ordersvc.stores.product_store import ProductStore
from ordersvc.stores.sale_store import SaleStore
from ordersvc.stores.user_store import UserStore

__all__ = ['ProductStore', 'SaleStore', 'UserStore']
