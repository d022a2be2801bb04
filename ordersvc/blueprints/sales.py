"""Sales blueprint - JSON API for recording and browsing sales."""
from decimal import Decimal

from flask import Blueprint, after_this_request, current_app, g, jsonify, request

from ordersvc.blueprints.metrics import sales_created_total
from ordersvc.domain.sale import NewSale, NewSaleItem, SaleFilter
from ordersvc.exceptions import FieldError, NotFoundError, UnauthorizedError, ValidationError
from ordersvc.middleware import get_services, get_tx_services, require_user, transactional
from ordersvc.query.result import QueryResult
from ordersvc.types.money import Money
from ordersvc.utils.params import (
    format_datetime, get_json_body, optional_datetime, optional_uuid, parse_order_by,
    parse_page, parse_uuid,
)

sales_bp = Blueprint('sales', __name__, url_prefix='/v1/sales')


def parse_filter(args) -> SaleFilter:
    """Build a SaleFilter from query parameters."""
    return SaleFilter(
        id=optional_uuid(args, 'sale_id'),
        user_id=optional_uuid(args, 'user_id'),
        start_created_date=optional_datetime(args, 'start_created_date'),
        end_created_date=optional_datetime(args, 'end_created_date'),
    )


def sale_to_dict(sale, user, products) -> dict:
    """
    JSON view of a sale.

    ``products`` maps product id to Product and supplies item names; the
    unit price always comes from the sale itself.
    """
    items = []
    for item in sale.items:
        product = products.get(item.product_id)
        items.append({
            'id': str(item.product_id),
            'name': str(product.name) if product is not None else None,
            'unitPrice': float(item.unit_price),
            'quantity': item.quantity,
            'amount': float(item.amount),
            'discount': float(item.discount),
        })

    return {
        'id': str(sale.id),
        'customer': {
            'id': str(user.id),
            'name': str(user.name),
            'email': user.email,
        },
        'amount': float(sale.amount),
        'discount': float(sale.discount),
        'items': items,
        'createdAt': format_datetime(sale.created_at),
        'updatedAt': format_datetime(sale.updated_at),
    }


def parse_new_sale(payload, max_items, max_quantity, max_discount):
    """
    Validate a create-sale body.

    Returns (discount, [(product_id, quantity), ...]) in request order.
    Every offending field is reported, not only the first.
    """
    errors = []

    discount = Money.zero()
    raw_discount = payload.get('discount')
    if raw_discount is not None:
        try:
            discount = Money.parse(raw_discount, field='discount')
        except ValidationError as e:
            errors.extend(e.fields)
        else:
            if discount.value > max_discount:
                errors.append(FieldError('discount', f'must be {max_discount} or less'))

    raw_items = payload.get('items')
    lines = []
    if not isinstance(raw_items, list) or not raw_items:
        errors.append(FieldError('items', 'at least one item is required'))
    elif len(raw_items) > max_items:
        errors.append(FieldError('items', f'at most {max_items} items are allowed'))
    else:
        for i, raw in enumerate(raw_items):
            prefix = f'items[{i}]'
            if not isinstance(raw, dict):
                errors.append(FieldError(prefix, 'must be an object'))
                continue
            try:
                product_id = parse_uuid(raw.get('productId'), f'{prefix}.productId')
            except ValidationError as e:
                errors.extend(e.fields)
                product_id = None

            quantity = raw.get('quantity')
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                errors.append(FieldError(f'{prefix}.quantity', 'must be an integer'))
            elif not 1 <= quantity <= max_quantity:
                errors.append(FieldError(f'{prefix}.quantity', f'must be between 1 and {max_quantity}'))
            elif product_id is not None:
                lines.append((product_id, quantity))

    if errors:
        raise ValidationError('Invalid sale', fields=errors)

    return discount, lines


def _products_by_id(services, ctx, product_ids) -> dict:
    return {p.id: p for p in services.products.query_by_ids(ctx, product_ids)}


@sales_bp.route('', methods=['GET'])
def list_sales():
    services = get_services()
    page = parse_page(request.args)
    filter = parse_filter(request.args)
    order_by = parse_order_by(services.sales, request.args)

    sales = services.sales.query(g.ctx, filter, order_by, page)
    total = services.sales.count(g.ctx, filter)

    users = {}
    for user_id in {s.user_id for s in sales}:
        users[user_id] = services.users.query_by_id(g.ctx, user_id)
    products = _products_by_id(services, g.ctx, [i.product_id for s in sales for i in s.items])

    items = [sale_to_dict(s, users[s.user_id], products) for s in sales]
    return jsonify(QueryResult(items, total, page).to_dict())


@sales_bp.route('/<uuid:sale_id>', methods=['GET'])
def get_sale(sale_id):
    services = get_services()
    sale = services.sales.query_by_id(g.ctx, sale_id)
    user = services.users.query_by_id(g.ctx, sale.user_id)
    products = _products_by_id(services, g.ctx, [i.product_id for i in sale.items])

    return jsonify(sale_to_dict(sale, user, products))


@sales_bp.route('', methods=['POST'])
@require_user
@transactional
def create_sale():
    """
    Record a sale for the calling user.

    Product prices are read inside the request transaction and copied onto
    the sale items, so later price changes do not affect recorded sales.
    """
    discount, lines = parse_new_sale(
        get_json_body(request),
        max_items=current_app.config['SALE_MAX_ITEMS'],
        max_quantity=current_app.config['SALE_MAX_ITEM_QUANTITY'],
        max_discount=Decimal(str(current_app.config['SALE_MAX_DISCOUNT'])),
    )

    services = get_tx_services()
    try:
        user = services.users.query_by_id(g.ctx, g.user_id)
    except NotFoundError:
        raise UnauthorizedError('Unknown caller')

    products = _products_by_id(services, g.ctx, [product_id for product_id, _ in lines])
    missing = list(dict.fromkeys(str(pid) for pid, _ in lines if pid not in products))
    if missing:
        raise ValidationError.for_field('items', f"invalid product id(s): {', '.join(missing)}")

    new_sale = NewSale(
        user_id=user.id,
        discount=discount,
        items=tuple(
            NewSaleItem(product_id=pid, quantity=quantity, price=products[pid].price)
            for pid, quantity in lines
        ),
    )
    sale = services.sales.create(g.ctx, new_sale)

    @after_this_request
    def count_sale(response):
        if response.status_code == 201:
            sales_created_total.inc()
        return response

    return jsonify(sale_to_dict(sale, user, products)), 201


@sales_bp.route('/<uuid:sale_id>', methods=['DELETE'])
@transactional
def delete_sale(sale_id):
    sales = get_tx_services().sales
    sale = sales.query_by_id(g.ctx, sale_id)
    sales.delete(g.ctx, sale)
    return '', 204
