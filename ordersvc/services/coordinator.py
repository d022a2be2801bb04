"""
Service bundle and transaction rebinding.

One request-scoped unit of work rebinds every domain service it needs to the
same transaction handle, so writes through any of them land in one atomic
transaction. The services never see each other; only the bundle does.
"""
from dataclasses import dataclass

from ordersvc.domain import product as product_domain
from ordersvc.domain import sale as sale_domain
from ordersvc.domain import user as user_domain
from ordersvc.query.order import ASC, OrderBy, QueryVocabulary
from ordersvc.services.product_service import ProductService
from ordersvc.services.sales_service import SaleService
from ordersvc.services.user_service import UserService
from ordersvc.stores import ProductStore, SaleStore, UserStore


@dataclass(frozen=True)
class Services:
    users: UserService
    products: ProductService
    sales: SaleService


def bind_to_transaction(services: Services, tx) -> Services:
    """
    Return a new bundle whose services all use ``tx``.

    The given bundle is not modified and stays safe for concurrent
    non-transactional reads. The returned bundle belongs to the owner of
    ``tx`` and must be discarded when that unit of work ends.
    """
    return Services(
        users=services.users.new_with_tx(tx),
        products=services.products.new_with_tx(tx),
        sales=services.sales.new_with_tx(tx),
    )


def sale_vocabulary() -> QueryVocabulary:
    return QueryVocabulary(
        fields={
            'sale_id': sale_domain.ORDER_BY_ID,
            'amount': sale_domain.ORDER_BY_AMOUNT,
            'discount': sale_domain.ORDER_BY_DISCOUNT,
            'created_at': sale_domain.ORDER_BY_CREATED_AT,
        },
        default=OrderBy(sale_domain.ORDER_BY_ID, ASC),
    )


def product_vocabulary() -> QueryVocabulary:
    return QueryVocabulary(
        fields={
            'product_id': product_domain.ORDER_BY_ID,
            'name': product_domain.ORDER_BY_NAME,
            'price': product_domain.ORDER_BY_PRICE,
        },
        default=OrderBy(product_domain.ORDER_BY_ID, ASC),
    )


def user_vocabulary() -> QueryVocabulary:
    return QueryVocabulary(
        fields={
            'user_id': user_domain.ORDER_BY_ID,
            'name': user_domain.ORDER_BY_NAME,
            'email': user_domain.ORDER_BY_EMAIL,
            'enabled': user_domain.ORDER_BY_ENABLED,
        },
        default=OrderBy(user_domain.ORDER_BY_ID, ASC),
    )


def build_services(session_factory) -> Services:
    """Wire SQLAlchemy stores and query vocabularies into the domain services."""
    return Services(
        users=UserService(UserStore(session_factory), user_vocabulary()),
        products=ProductService(ProductStore(session_factory), product_vocabulary()),
        sales=SaleService(SaleStore(session_factory), sale_vocabulary()),
    )
