"""Parse Kubernetes resource quantities such as ``500m`` or ``2Gi``."""

from __future__ import annotations

import re
from decimal import Decimal, localcontext

_FORMAT_MESSAGE = (
    "quantities must match the regular expression "
    "'^([+-]?[0-9.]+)([eEinumkKMGTP]*[-+]?[0-9]*)$'"
)

_BINARY_EXPONENTS = {"Ki": 1, "Mi": 2, "Gi": 3, "Ti": 4, "Pi": 5, "Ei": 6}
_DECIMAL_EXPONENTS = {
    "n": -9,
    "u": -6,
    "m": -3,
    "": 0,
    "k": 3,
    "M": 6,
    "G": 9,
    "T": 12,
    "P": 15,
    "E": 18,
}

_PATTERN = re.compile(
    r"([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))"
    r"(Ki|Mi|Gi|Ti|Pi|Ei|[eE][+-]?[0-9]+|[numkMGTPE])?"
)


class QuantityError(ValueError):
    """The text is not a valid resource quantity."""


def parse_quantity(text: str) -> Decimal:
    """Return the exact value of a quantity like ``100m``, ``1Gi`` or ``2e3``."""
    match = _PATTERN.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise QuantityError(_FORMAT_MESSAGE)
    number, suffix = match.group(1), match.group(2) or ""
    with localcontext() as ctx:
        ctx.prec = 200
        value = Decimal(number)
        try:
            if suffix in _BINARY_EXPONENTS:
                return value * Decimal(1024) ** _BINARY_EXPONENTS[suffix]
            if suffix in _DECIMAL_EXPONENTS:
                return value.scaleb(_DECIMAL_EXPONENTS[suffix])
            return value.scaleb(int(suffix[1:]))
        except ArithmeticError as exc:
            raise QuantityError(f"quantity {text!r} is out of range") from exc