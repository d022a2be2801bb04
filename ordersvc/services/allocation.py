"""
Allocation of a sale's aggregate discount across its line items.

Pure functions, no persistence. Shares are proportional to each line's
amount and rounded to cents with ROUND_HALF_UP (half away from zero for the
non-negative values involved). Rounding each share independently can leave
the total a few cents off, so the FIRST line in caller order absorbs the
signed remainder. That keeps ``sum(line.discount) == discount`` exact and the
result deterministic for a given item order. A cheap first line can be left
with a negative discount (0.01, 1.00, 1.00, 1.00 sharing 0.02 gives -0.01).
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from ordersvc.exceptions import ValidationError
from ordersvc.types.money import CENT, Money


@dataclass(frozen=True)
class AllocationLine:
    amount: Money
    discount: Money


@dataclass(frozen=True)
class Allocation:
    amount: Money
    discount: Money
    lines: Tuple[AllocationLine, ...]


def sale_amount(items: Iterable[Tuple[int, Money]]) -> Money:
    """Sum of quantity x unit price over (quantity, unit_price) pairs."""
    total = Money.zero()
    for quantity, unit_price in items:
        if quantity < 0:
            raise ValidationError.for_field('quantity', 'must be 0 or greater')
        total = total + unit_price * quantity
    return total


def allocate(items, discount: Money) -> Allocation:
    """
    Split ``discount`` across (quantity, unit_price) pairs.

    Raises:
        ValidationError: the sale amount is zero, or the discount exceeds it.
    """
    items = list(items)
    amount = sale_amount(items)

    if amount.is_zero():
        raise ValidationError.for_field('items', 'sale amount must be greater than 0')
    if discount > amount:
        raise ValidationError.for_field(
            'discount',
            f'discount[{discount}] is greater than total sale amount[{amount}]'
        )

    line_amounts = [unit_price * quantity for quantity, unit_price in items]

    if discount.is_zero():
        zero = Money.zero()
        lines = tuple(AllocationLine(a, zero) for a in line_amounts)
        return Allocation(amount, discount, lines)

    shares = [_share(discount.value, a.value, amount.value) for a in line_amounts]

    remainder = discount.value - sum(shares, Decimal('0'))
    shares[0] += remainder

    lines = tuple(
        AllocationLine(a, Money(s)) for a, s in zip(line_amounts, shares)
    )
    return Allocation(amount, discount, lines)


def _share(discount: Decimal, line_amount: Decimal, total: Decimal) -> Decimal:
    # Multiply before dividing so the only rounding is the final one to cents
    return (discount * line_amount / total).quantize(CENT, rounding=ROUND_HALF_UP)
