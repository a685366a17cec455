from decimal import Decimal, DecimalException, Inexact, localcontext

# Amounts are stored as integer units of 1/10_000.
SCALE = 4
UNITS_PER_WHOLE = 10 ** SCALE

# Largest amount accepted, in units (28 digits).
MAX_UNITS = 10 ** 28 - 1


def to_units(amount: Decimal) -> int:
    """
    Convert an exact decimal amount into integer units.

    Raises ValueError if the amount is not finite, has more than SCALE
    fractional digits, or exceeds MAX_UNITS.
    """
    if not isinstance(amount, Decimal):
        raise ValueError(f"amount must be a Decimal, got {type(amount).__name__}")
    if not amount.is_finite():
        raise ValueError(f"amount {amount} is not a finite number")
    if amount and amount.adjusted() + SCALE >= len(str(MAX_UNITS)):
        raise ValueError(f"amount {amount} is too large")

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits))
        ctx.traps[Inexact] = True
        try:
            scaled = amount.scaleb(SCALE)
        except DecimalException as e:
            raise ValueError(f"amount {amount} cannot be represented exactly") from e

    if scaled != scaled.to_integral_value():
        raise ValueError(f"amount {amount} has more than {SCALE} decimal places")
    return int(scaled)


def format_units(units: int) -> str:
    """Render integer units with exactly SCALE decimal places, e.g. 15000 -> '1.5000'."""
    sign = "-" if units < 0 else ""
    whole, fraction = divmod(abs(units), UNITS_PER_WHOLE)
    return f"{sign}{whole}.{fraction:0{SCALE}d}"
