"""
Unit tests for SaleService over an in-memory storer.
"""
import uuid

import pytest

from ordersvc.domain.sale import NewSale, NewSaleItem
from ordersvc.exceptions import NotFoundError, RequestCancelledError, StoreError, ValidationError
from ordersvc.services.coordinator import sale_vocabulary
from ordersvc.services.sales_service import SaleService
from ordersvc.types.money import MAX_AMOUNT, Money
from ordersvc.utils.request_context import RequestContext


class FakeSaleStore:
    """Records calls instead of touching a database."""

    def __init__(self, tx=None, fail=False):
        self.tx = tx
        self.fail = fail
        self.created = []
        self.deleted = []

    def new_with_tx(self, tx):
        return FakeSaleStore(tx=tx, fail=self.fail)

    def create(self, ctx, sale):
        if self.fail:
            raise StoreError('saledb.create: disk full', operation='create')
        self.created.append(sale)

    def delete(self, ctx, sale):
        if sale not in self.created:
            raise NotFoundError(f'Sale {sale.id} not found')
        self.deleted.append(sale)


def m(value):
    return Money.must_parse(value)


def new_sale(discount='0.00', items=((1, '10.34'), (2, '5.00'))):
    return NewSale(
        user_id=uuid.uuid4(),
        discount=m(discount),
        items=tuple(NewSaleItem(uuid.uuid4(), quantity, m(price)) for quantity, price in items),
    )


@pytest.fixture
def store():
    return FakeSaleStore()


@pytest.fixture
def service(store):
    return SaleService(store, sale_vocabulary())


@pytest.fixture
def ctx():
    return RequestContext.background()


class TestCreate:

    def test_builds_sale_with_allocated_items(self, service, store, ctx):
        request = new_sale(discount='3.00')
        sale = service.create(ctx, request)

        assert store.created == [sale]
        assert str(sale.amount) == '20.34'
        assert str(sale.discount) == '3.00'
        assert [str(i.discount) for i in sale.items] == ['1.53', '1.47']
        assert [str(i.amount) for i in sale.items] == ['10.34', '10.00']
        assert [i.product_id for i in sale.items] == [i.product_id for i in request.items]
        assert all(i.sale_id == sale.id for i in sale.items)
        assert sale.created_at.tzinfo is not None

    def test_unit_price_is_the_snapshot_price(self, service, ctx):
        sale = service.create(ctx, new_sale(items=((4, '2.25'),)))
        assert str(sale.items[0].unit_price) == '2.25'

    def test_discount_above_amount_never_reaches_store(self, service, store, ctx):
        with pytest.raises(ValidationError):
            service.create(ctx, new_sale(discount='20.35'))
        assert store.created == []

    def test_total_above_column_limit_never_reaches_store(self, service, store, ctx):
        with pytest.raises(ValidationError) as exc:
            service.create(ctx, new_sale(items=((100, '99999999.99'),)))
        assert exc.value.fields[0].field == 'items'
        assert store.created == []

    def test_total_at_column_limit_is_accepted(self, service, store, ctx):
        sale = service.create(ctx, new_sale(items=((1, '99999999.98'), (1, '0.01'))))
        assert sale.amount.value == MAX_AMOUNT
        assert store.created == [sale]

    def test_empty_sale_rejected(self, service, store, ctx):
        with pytest.raises(ValidationError):
            service.create(ctx, new_sale(items=()))
        assert store.created == []

    def test_cancelled_context_stops_before_store(self, service, store):
        ctx = RequestContext.background()
        ctx.cancel()
        with pytest.raises(RequestCancelledError):
            service.create(ctx, new_sale())
        assert store.created == []

    def test_store_failure_gets_operation_context(self, ctx):
        service = SaleService(FakeSaleStore(fail=True), sale_vocabulary())
        with pytest.raises(StoreError) as exc:
            service.create(ctx, new_sale())
        assert 'create: sale[' in exc.value.message
        assert isinstance(exc.value.__cause__, StoreError)


class TestDelete:

    def test_delete_existing(self, service, store, ctx):
        sale = service.create(ctx, new_sale())
        service.delete(ctx, sale)
        assert store.deleted == [sale]

    def test_delete_missing_is_not_found(self, service, ctx):
        other = SaleService(FakeSaleStore(), sale_vocabulary()).create(ctx, new_sale())
        with pytest.raises(NotFoundError):
            service.delete(ctx, other)


class TestNewWithTx:

    def test_returns_new_service_over_bound_store(self, service, store):
        tx = object()
        bound = service.new_with_tx(tx)

        assert bound is not service
        assert bound._storer.tx is tx
        assert store.tx is None
        assert bound.vocabulary is service.vocabulary

    def test_order_parsing_uses_vocabulary(self, service):
        order = service.parse_order_by('created_at,desc')
        assert (order.field, order.direction) == ('created_at', 'DESC')
