"""Users blueprint - JSON API over the user service."""
from flask import Blueprint, g, jsonify, request

from ordersvc.domain.user import NewUser, UpdateUser, UserFilter
from ordersvc.exceptions import ValidationError
from ordersvc.middleware import get_services, get_tx_services, transactional
from ordersvc.query.result import QueryResult
from ordersvc.types.email import parse_email
from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.types.unset import UNSET
from ordersvc.utils.params import (
    format_datetime, get_json_body, optional_datetime, optional_text, optional_uuid,
    parse_order_by, parse_page,
)

users_bp = Blueprint('users', __name__, url_prefix='/v1/users')


def parse_filter(args) -> UserFilter:
    """Build a UserFilter from query parameters."""
    email = optional_text(args, 'email')
    name = optional_text(args, 'name')
    return UserFilter(
        id=optional_uuid(args, 'user_id'),
        name=name,
        email=parse_email(email) if email is not UNSET else UNSET,
        start_created_date=optional_datetime(args, 'start_created_date'),
        end_created_date=optional_datetime(args, 'end_created_date'),
    )


def user_to_dict(user) -> dict:
    return {
        'id': str(user.id),
        'name': str(user.name),
        'email': user.email,
        'roles': [role.value for role in user.roles],
        'enabled': user.enabled,
        'createdAt': format_datetime(user.created_at),
        'updatedAt': format_datetime(user.updated_at),
    }


@users_bp.route('', methods=['GET'])
def list_users():
    services = get_services()
    page = parse_page(request.args)
    filter = parse_filter(request.args)
    order_by = parse_order_by(services.users, request.args)

    users = services.users.query(g.ctx, filter, order_by, page)
    total = services.users.count(g.ctx, filter)

    return jsonify(QueryResult([user_to_dict(u) for u in users], total, page).to_dict())


@users_bp.route('/<uuid:user_id>', methods=['GET'])
def get_user(user_id):
    user = get_services().users.query_by_id(g.ctx, user_id)
    return jsonify(user_to_dict(user))


@users_bp.route('', methods=['POST'])
@transactional
def create_user():
    payload = get_json_body(request)

    new_user = NewUser(
        name=Name.parse(payload.get('name')),
        email=parse_email(payload.get('email')),
        roles=Role.parse_many(payload.get('roles') or [Role.USER.value]),
        password=payload.get('password'),
    )
    user = get_tx_services().users.create(g.ctx, new_user)

    return jsonify(user_to_dict(user)), 201


@users_bp.route('/<uuid:user_id>', methods=['PUT'])
@transactional
def update_user(user_id):
    payload = get_json_body(request)

    update = UpdateUser(
        name=Name.parse(payload['name']) if 'name' in payload else UNSET,
        email=parse_email(payload['email']) if 'email' in payload else UNSET,
        roles=Role.parse_many(payload['roles']) if 'roles' in payload else UNSET,
        password=payload['password'] if 'password' in payload else UNSET,
        enabled=_parse_bool(payload['enabled'], 'enabled') if 'enabled' in payload else UNSET,
    )

    users = get_tx_services().users
    user = users.query_by_id(g.ctx, user_id)
    user = users.update(g.ctx, user, update)

    return jsonify(user_to_dict(user))


@users_bp.route('/<uuid:user_id>', methods=['DELETE'])
@transactional
def delete_user(user_id):
    users = get_tx_services().users
    user = users.query_by_id(g.ctx, user_id)
    users.delete(g.ctx, user)
    return '', 204


def _parse_bool(raw, field):
    if not isinstance(raw, bool):
        raise ValidationError.for_field(field, 'must be true or false')
    return raw
