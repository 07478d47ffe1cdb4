"""Leaf RPC methods.

Each method receives the raw, untyped ``params`` value from the request and
is responsible for extracting its own positional arguments. Any mismatch
(params not an array, a missing argument, an argument of the wrong JSON type)
raises InvalidParamsError with the message "Invalid params". Arguments past
the ones a method needs are ignored.

Methods return ``(result, result_type)``: the value rendered as a string and
the tag telling the caller how to reinterpret it.
"""

from __future__ import annotations

import json
import math
from collections import Counter
from decimal import Decimal
from typing import Any

from sockrpc.core.errors import SockRpcError
from sockrpc.rpc.protocol import INVALID_PARAMS_MESSAGE


class InvalidParamsError(SockRpcError):
    """Raised when method parameters are invalid."""

    def __init__(self, message: str = INVALID_PARAMS_MESSAGE) -> None:
        super().__init__(message)


MethodResult = tuple[str, str]


def format_double(value: float) -> str:
    """Render a double the way the wire expects.

    Shortest round-trip digits in positional notation, no exponent, and no
    trailing ".0" on integral values. Non-finite values are "inf", "-inf"
    and "NaN".

    Examples:
        >>> format_double(3.0)
        '3'
        >>> format_double(1e-7)
        '0.0000001'
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return format(Decimal(repr(value)).normalize(), "f")


def _ieee_pow(base: float, exponent: float) -> float:
    """math.pow with IEEE-754 results instead of exceptions."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        negative = base < 0 and _is_odd_integer(exponent)
        return -math.inf if negative else math.inf
    except ValueError:
        if base == 0:
            # Zero to a negative power: pole, signed for odd integer exponents
            negative = math.copysign(1.0, base) < 0 and _is_odd_integer(exponent)
            return -math.inf if negative else math.inf
        # Negative base with a non-integral exponent
        return math.nan


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and value % 2 == 1


def _positional(params: Any, count: int) -> list[Any]:
    if not isinstance(params, list) or len(params) < count:
        raise InvalidParamsError()
    return params[:count]


def _as_double(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParamsError()
    return float(value)


def _as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidParamsError()
    return value


def rpc_floor(params: Any) -> MethodResult:
    """Round a number down. The result is a double tagged "int"."""
    (x_value,) = _positional(params, 1)
    x = _as_double(x_value)
    # Integral doubles (including -0.0) are their own floor
    floored = x if x.is_integer() else float(math.floor(x))
    return format_double(floored), "int"


def rpc_nroot(params: Any) -> MethodResult:
    """Compute x ** (1 / n) for params [n, x].

    n = 0 is not trapped; the exponent becomes an infinity and the result is
    whatever IEEE pow gives for it.
    """
    n_value, x_value = _positional(params, 2)
    n = _as_double(n_value)
    x = _as_double(x_value)
    exponent = math.copysign(math.inf, n) if n == 0 else 1.0 / n
    return format_double(_ieee_pow(x, exponent)), "double"


def rpc_reverse(params: Any) -> MethodResult:
    (s,) = _positional(params, 1)
    return _as_string(s)[::-1], "string"


def rpc_valid_anagram(params: Any) -> MethodResult:
    first, second = _positional(params, 2)
    is_anagram = Counter(_as_string(first)) == Counter(_as_string(second))
    return ("true" if is_anagram else "false"), "bool"


def rpc_sort(params: Any) -> MethodResult:
    """Sort an array of strings by code point; the result is its JSON text."""
    (items,) = _positional(params, 1)
    if not isinstance(items, list):
        raise InvalidParamsError()
    strings = [_as_string(item) for item in items]
    return json.dumps(sorted(strings), separators=(",", ":"), ensure_ascii=False), "string"
