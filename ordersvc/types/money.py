"""Fixed-precision monetary values."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ordersvc.exceptions import ValidationError

CENT = Decimal('0.01')

# Largest magnitude a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal('99999999.99')


class Money:
    """Monetary amount with exactly two fraction digits.

    Backed by ``Decimal`` so repeated additions never drift the way binary
    floats do. Build instances through :meth:`parse`; arithmetic between
    Money values stays exact and may go negative, sign checks only happen
    where input crosses into the system.
    """

    __slots__ = ('_amount',)

    def __init__(self, amount: Decimal):
        if not isinstance(amount, Decimal):
            raise TypeError(f"Money amount must be a Decimal, got {type(amount).__name__}")
        self._amount = amount.quantize(CENT)

    @classmethod
    def parse(cls, raw, field: str = 'amount', allow_negative: bool = False) -> Money:
        """Validate ``raw`` and return it as Money.

        Accepts int, float, Decimal or numeric text. Rejects NaN, infinities,
        more than two fraction digits, magnitudes above MAX_AMOUNT and,
        unless ``allow_negative``, values below zero. Failures raise
        ValidationError tagged with ``field``.
        """
        if isinstance(raw, Money):
            value = raw.value
        elif isinstance(raw, bool) or raw is None:
            raise ValidationError.for_field(field, 'must be a number')
        elif isinstance(raw, Decimal):
            value = raw
        elif isinstance(raw, (int, float, str)):
            try:
                # repr of a float is its shortest round-tripping form, so 10.34 stays 10.34
                value = Decimal(repr(raw) if isinstance(raw, float) else str(raw).strip())
            except InvalidOperation:
                raise ValidationError.for_field(field, f'invalid number {raw!r}')
        else:
            raise ValidationError.for_field(field, f'unsupported type {type(raw).__name__}')

        if not value.is_finite():
            raise ValidationError.for_field(field, 'must be a finite number')
        if abs(value) > MAX_AMOUNT:
            raise ValidationError.for_field(field, f'must be at most {MAX_AMOUNT} in magnitude')
        try:
            exact = value == value.quantize(CENT)
        except InvalidOperation:
            raise ValidationError.for_field(field, f'invalid number {raw!r}')
        if not exact:
            raise ValidationError.for_field(field, 'must have at most two decimal places')
        if value < 0 and not allow_negative:
            raise ValidationError.for_field(field, 'must be 0 or greater')

        return cls(value)

    @classmethod
    def must_parse(cls, raw) -> Money:
        """Parse or raise ValueError. For fixtures and seed data only."""
        try:
            return cls.parse(raw, allow_negative=True)
        except ValidationError as e:
            raise ValueError(e.message) from e

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal('0'))

    @property
    def value(self) -> Decimal:
        return self._amount

    def is_zero(self) -> bool:
        return self._amount == 0

    # --- Arithmetic -----------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._amount + other._amount)

    def __radd__(self, other):
        # sum() starts from int 0
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self._amount - other._amount)

    def __mul__(self, factor):
        if isinstance(factor, bool) or not isinstance(factor, int):
            return NotImplemented
        return Money(self._amount * factor)

    __rmul__ = __mul__

    def __neg__(self):
        return Money(-self._amount)

    # --- Comparison -----------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount == other._amount

    def __lt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount < other._amount

    def __le__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount <= other._amount

    def __gt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount > other._amount

    def __ge__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return self._amount >= other._amount

    def __hash__(self):
        return hash(self._amount)

    # --- Display --------------------------------------------------------------

    def __float__(self):
        return float(self._amount)

    def __str__(self):
        return f"{self._amount:.2f}"

    def __repr__(self):
        return f"Money('{self._amount:.2f}')"
