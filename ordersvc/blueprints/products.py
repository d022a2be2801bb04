"""Products blueprint - JSON API over the product service."""
from flask import Blueprint, g, jsonify, request

from ordersvc.domain.product import NewProduct, ProductFilter, UpdateProduct
from ordersvc.middleware import get_services, get_tx_services, transactional
from ordersvc.query.result import QueryResult
from ordersvc.types.money import Money
from ordersvc.types.name import Name
from ordersvc.types.unset import UNSET
from ordersvc.utils.params import (
    format_datetime, get_json_body, optional_money, optional_text, optional_uuid,
    optional_uuid_list, parse_order_by, parse_page,
)

products_bp = Blueprint('products', __name__, url_prefix='/v1/products')


def parse_filter(args) -> ProductFilter:
    """Build a ProductFilter from query parameters."""
    return ProductFilter(
        id=optional_uuid(args, 'product_id'),
        ids=optional_uuid_list(args, 'product_ids'),
        name=optional_text(args, 'name'),
        price=optional_money(args, 'price'),
    )


def product_to_dict(product) -> dict:
    return {
        'id': str(product.id),
        'name': str(product.name),
        'price': float(product.price),
        'createdAt': format_datetime(product.created_at),
        'updatedAt': format_datetime(product.updated_at),
    }


@products_bp.route('', methods=['GET'])
def list_products():
    services = get_services()
    page = parse_page(request.args)
    filter = parse_filter(request.args)
    order_by = parse_order_by(services.products, request.args)

    products = services.products.query(g.ctx, filter, order_by, page)
    total = services.products.count(g.ctx, filter)

    return jsonify(QueryResult([product_to_dict(p) for p in products], total, page).to_dict())


@products_bp.route('/<uuid:product_id>', methods=['GET'])
def get_product(product_id):
    product = get_services().products.query_by_id(g.ctx, product_id)
    return jsonify(product_to_dict(product))


@products_bp.route('', methods=['POST'])
@transactional
def create_product():
    payload = get_json_body(request)

    new_product = NewProduct(
        name=Name.parse(payload.get('name')),
        price=Money.parse(payload.get('price'), field='price'),
    )
    product = get_tx_services().products.create(g.ctx, new_product)

    return jsonify(product_to_dict(product)), 201


@products_bp.route('/<uuid:product_id>', methods=['PUT'])
@transactional
def update_product(product_id):
    payload = get_json_body(request)

    update = UpdateProduct(
        name=Name.parse(payload['name']) if 'name' in payload else UNSET,
        price=Money.parse(payload['price'], field='price') if 'price' in payload else UNSET,
    )

    products = get_tx_services().products
    product = products.query_by_id(g.ctx, product_id)
    product = products.update(g.ctx, product, update)

    return jsonify(product_to_dict(product))


@products_bp.route('/<uuid:product_id>', methods=['DELETE'])
@transactional
def delete_product(product_id):
    products = get_tx_services().products
    product = products.query_by_id(g.ctx, product_id)
    products.delete(g.ctx, product)
    return '', 204
