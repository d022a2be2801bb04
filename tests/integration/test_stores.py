"""
Integration tests for the SQLAlchemy stores through the domain services.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from ordersvc.domain.product import NewProduct, ProductFilter, UpdateProduct
from ordersvc.domain.sale import NewSale, NewSaleItem, SaleFilter
from ordersvc.domain.user import NewUser, UpdateUser, UserFilter
from ordersvc.exceptions import (
    NotFoundError, RequestCancelledError, StoreError, UnauthorizedError, ValidationError,
)
from ordersvc.query.order import DESC, OrderBy
from ordersvc.query.page import Page
from ordersvc.types.email import parse_email
from ordersvc.types.money import Money
from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.utils.request_context import RequestContext


def make_sale(services, ctx, user, products, discount='3.00'):
    return services.sales.create(ctx, NewSale(
        user_id=user.id,
        discount=Money.must_parse(discount),
        items=(
            NewSaleItem(products[0].id, 1, products[0].price),
            NewSaleItem(products[1].id, 2, products[1].price),
        ),
    ))


class TestSaleStore:

    def test_create_and_query_by_id(self, services, ctx, user, products):
        sale = make_sale(services, ctx, user, products)

        stored = services.sales.query_by_id(ctx, sale.id)
        assert stored.id == sale.id
        assert stored.user_id == user.id
        assert str(stored.amount) == '20.34'
        assert [str(i.discount) for i in stored.items] == ['1.53', '1.47']
        assert [i.product_id for i in stored.items] == [products[0].id, products[1].id]
        assert sum(i.amount for i in stored.items) == stored.amount
        assert sum(i.discount for i in stored.items) == stored.discount

    def test_query_by_missing_id(self, services, ctx):
        with pytest.raises(NotFoundError):
            services.sales.query_by_id(ctx, uuid.uuid4())

    def test_query_paging_and_count(self, services, ctx, user, products):
        for discount in ('0.00', '1.00', '2.00'):
            make_sale(services, ctx, user, products, discount)

        order = OrderBy('discount', DESC)
        first = services.sales.query(ctx, SaleFilter(), order, Page(1, 2))
        second = services.sales.query(ctx, SaleFilter(), order, Page(2, 2))

        assert [str(s.discount) for s in first] == ['2.00', '1.00']
        assert [str(s.discount) for s in second] == ['0.00']
        assert services.sales.count(ctx, SaleFilter()) == 3

    def test_filter_by_user_and_dates(self, services, ctx, user, products):
        sale = make_sale(services, ctx, user, products)
        now = datetime.now(timezone.utc)

        assert services.sales.count(ctx, SaleFilter(user_id=user.id)) == 1
        assert services.sales.count(ctx, SaleFilter(user_id=uuid.uuid4())) == 0
        assert services.sales.count(ctx, SaleFilter(start_created_date=now - timedelta(hours=1))) == 1
        assert services.sales.count(ctx, SaleFilter(end_created_date=now - timedelta(hours=1))) == 0
        assert services.sales.count(ctx, SaleFilter(id=sale.id)) == 1

    def test_delete_removes_items(self, services, ctx, user, products, session_factory):
        from ordersvc.models import SaleItemRow
        sale = make_sale(services, ctx, user, products)

        services.sales.delete(ctx, sale)

        with pytest.raises(NotFoundError):
            services.sales.query_by_id(ctx, sale.id)
        with session_factory() as session:
            assert session.query(SaleItemRow).count() == 0

    def test_delete_missing(self, services, ctx, user, products):
        sale = make_sale(services, ctx, user, products)
        services.sales.delete(ctx, sale)
        with pytest.raises(NotFoundError):
            services.sales.delete(ctx, sale)

    def test_first_item_discount_may_be_negative(self, services, ctx, user):
        cheap = services.products.create(ctx, NewProduct(name=Name.parse('Mint Candy'), price=Money.must_parse('0.01')))
        regular = services.products.create(ctx, NewProduct(name=Name.parse('Salt Pack'), price=Money.must_parse('1.00')))
        sale = services.sales.create(ctx, NewSale(
            user_id=user.id,
            discount=Money.must_parse('0.02'),
            items=(NewSaleItem(cheap.id, 1, cheap.price),) + (NewSaleItem(regular.id, 1, regular.price),) * 3,
        ))

        stored = services.sales.query_by_id(ctx, sale.id)
        assert [str(i.discount) for i in stored.items] == ['-0.01', '0.01', '0.01', '0.01']
        assert sum(i.discount for i in stored.items) == stored.discount

    def test_unknown_order_field_is_store_error(self, services, ctx):
        with pytest.raises(StoreError):
            services.sales.query(ctx, SaleFilter(), OrderBy('password'), Page())


class TestProductStore:

    def test_filters(self, services, ctx, products):
        assert services.products.count(ctx, ProductFilter(name='tea')) == 1
        assert services.products.count(ctx, ProductFilter(price=Money.must_parse('1.00'))) == 1
        ids = (products[0].id, products[2].id)
        found = services.products.query(ctx, ProductFilter(ids=ids), OrderBy('price'), Page())
        assert [str(p.price) for p in found] == ['1.00', '10.34']

    def test_query_by_ids_skips_unknown(self, services, ctx, products):
        found = services.products.query_by_ids(ctx, [products[1].id, uuid.uuid4(), products[1].id])
        assert [p.id for p in found] == [products[1].id]

    def test_update_only_given_fields(self, services, ctx, products):
        product = products[0]
        updated = services.products.update(ctx, product, UpdateProduct(price=Money.must_parse('11.00')))

        stored = services.products.query_by_id(ctx, product.id)
        assert stored.name == product.name
        assert str(stored.price) == '11.00'
        assert updated.updated_at >= product.updated_at

    def test_delete_product_with_sales(self, services, ctx, user, products):
        make_sale(services, ctx, user, products)

        with pytest.raises(ValidationError) as exc:
            services.products.delete(ctx, products[0])
        assert exc.value.fields[0].field == 'product_id'
        assert services.products.query_by_id(ctx, products[0].id).name == products[0].name


class TestUserStore:

    def test_roles_round_trip(self, services, ctx):
        user = services.users.create(ctx, NewUser(
            name=Name.parse('Admin Person'),
            email=parse_email('admin@test.com'),
            roles=(Role.ADMIN, Role.USER),
            password='secret-pass',
        ))
        stored = services.users.query_by_id(ctx, user.id)
        assert stored.roles == (Role.ADMIN, Role.USER)
        assert stored.password_hash != 'secret-pass'

    def test_duplicate_email(self, services, ctx, user):
        with pytest.raises(ValidationError) as exc:
            services.users.create(ctx, NewUser(
                name=Name.parse('Someone Else'),
                email=user.email,
                roles=(Role.USER,),
                password='password123',
            ))
        assert exc.value.fields[0].field == 'email'

    def test_filter_by_email(self, services, ctx, user):
        assert services.users.count(ctx, UserFilter(email=user.email)) == 1
        assert services.users.count(ctx, UserFilter(name='nobody')) == 0

    def test_authenticate(self, services, ctx, user):
        assert services.users.authenticate(ctx, user.email, 'password123').id == user.id
        with pytest.raises(UnauthorizedError):
            services.users.authenticate(ctx, user.email, 'wrong-password')
        with pytest.raises(NotFoundError):
            services.users.authenticate(ctx, 'missing@test.com', 'password123')

    def test_disabled_user_cannot_authenticate(self, services, ctx, user):
        services.users.update(ctx, user, UpdateUser(enabled=False))
        with pytest.raises(UnauthorizedError):
            services.users.authenticate(ctx, user.email, 'password123')

    def test_short_password(self, services, ctx):
        with pytest.raises(ValidationError):
            services.users.create(ctx, NewUser(
                name=Name.parse('Short Pass'),
                email=parse_email('short@test.com'),
                roles=(Role.USER,),
                password='123',
            ))


class TestStoreDeadline:
    """Cancelled or expired requests stop at the store."""

    def test_cancelled_context_issues_no_query(self, services):
        ctx = RequestContext.background()
        ctx.cancel()
        with pytest.raises(RequestCancelledError):
            services.products._storer.count(ctx, ProductFilter())

    def test_driver_error_after_cancel_is_cancellation(self, services):
        ctx = RequestContext.background()
        with pytest.raises(RequestCancelledError):
            with services.products._storer._session(ctx, 'query') as session:
                ctx.cancel()
                session.execute(text('SELECT * FROM no_such_table'))

    def test_driver_error_is_store_error(self, services, ctx):
        with pytest.raises(StoreError) as exc:
            with services.products._storer._session(ctx, 'query') as session:
                session.execute(text('SELECT * FROM no_such_table'))
        assert exc.value.operation == 'query'
