"""Validated value types shared by every domain."""
from ordersvc.types.money import Money
from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.types.email import parse_email
from ordersvc.types.unset import UNSET, is_set

__all__ = ['Money', 'Name', 'Role', 'parse_email', 'UNSET', 'is_set']
