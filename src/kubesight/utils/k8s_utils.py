from decimal import ROUND_CEILING, Decimal, InvalidOperation, localcontext
from typing import Optional, Union

from ..core.exceptions import InvalidQuantityError

QuantityInput = Union[str, int, float, Decimal, None]

_BINARY_SUFFIXES = {
    "Ki": Decimal(1024),
    "Mi": Decimal(1024**2),
    "Gi": Decimal(1024**3),
    "Ti": Decimal(1024**4),
    "Pi": Decimal(1024**5),
    "Ei": Decimal(1024**6),
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("0.000000001"),
    "u": Decimal("0.000001"),
    "m": Decimal("0.001"),
    "k": Decimal(1000),
    "M": Decimal(1000**2),
    "G": Decimal(1000**3),
    "T": Decimal(1000**4),
    "P": Decimal(1000**5),
    "E": Decimal(1000**6),
}


def _exact_product(a: Decimal, b: Decimal) -> Decimal:
    # The default context keeps 28 digits; size it so the product is never rounded.
    with localcontext() as ctx:
        ctx.prec = len(a.as_tuple().digits) + len(b.as_tuple().digits)
        return a * b


def parse_quantity(quantity: QuantityInput) -> Decimal:
    """
    Parse a kubernetes quantity to an exact Decimal.
    Adapted from kubernetes-python utils.

    Raises:
        InvalidQuantityError: if the value is not a valid quantity.
    """
    if quantity is None:
        return Decimal(0)
    if isinstance(quantity, bool):
        raise InvalidQuantityError(f"Invalid quantity: {quantity!r}")
    if isinstance(quantity, (int, Decimal)):
        return Decimal(quantity)
    if isinstance(quantity, float):
        # str() keeps the shortest repr, Decimal(float) would keep binary noise
        return Decimal(str(quantity))

    text = str(quantity).strip()
    if not text:
        raise InvalidQuantityError("Invalid quantity: empty string")

    number, multiplier = text, Decimal(1)
    if text[-2:] in _BINARY_SUFFIXES:
        number, multiplier = text[:-2], _BINARY_SUFFIXES[text[-2:]]
    elif text[-1] in _DECIMAL_SUFFIXES:
        number, multiplier = text[:-1], _DECIMAL_SUFFIXES[text[-1]]

    try:
        value = Decimal(number)
    except InvalidOperation as e:
        raise InvalidQuantityError(f"Invalid quantity: {quantity!r}") from e
    if not value.is_finite():
        raise InvalidQuantityError(f"Invalid quantity: {quantity!r}")

    return _exact_product(value, multiplier)


def parse_cpu(cpu: QuantityInput) -> int:
    """Converts a K8s CPU quantity to millicores, rounding up like MilliValue()."""
    if cpu is None or cpu == "":
        return 0
    millicores = _exact_product(parse_quantity(cpu), Decimal(1000))
    return int(millicores.to_integral_value(rounding=ROUND_CEILING))


def parse_memory(memory: QuantityInput) -> int:
    """Converts a K8s memory quantity to bytes, rounding up like Value()."""
    if memory is None or memory == "":
        return 0
    return int(parse_quantity(memory).to_integral_value(rounding=ROUND_CEILING))


def format_cpu(millicores: Optional[int]) -> str:
    """Renders millicores the way kubectl does: whole cores when exact, else '<n>m'."""
    if not millicores:
        return "0"
    if millicores % 1000 == 0:
        return str(millicores // 1000)
    return f"{millicores}m"


def format_memory(num_bytes: Optional[int]) -> str:
    """Renders bytes with the largest binary suffix that keeps one decimal of precision."""
    if not num_bytes:
        return "0"
    for suffix in ("Ei", "Pi", "Ti", "Gi", "Mi", "Ki"):
        unit = _BINARY_SUFFIXES[suffix]
        if num_bytes >= unit:
            value = Decimal(num_bytes) / unit
            if value == value.to_integral_value():
                return f"{int(value)}{suffix}"
            return f"{value:.1f}{suffix}"
    return str(num_bytes)
