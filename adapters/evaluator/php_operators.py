"""
Adapter helper: semantyka operatorów PHP dla statycznego ewaluatora.

Wszystkie funkcje działają na wartościach już wyliczonych:
  int / float / str / bool / None / dict (tablica PHP, kolejność wstawiania)

Zasady (PHP 8, platforma 64-bitowa):
  - int wychodzący poza zakres 64 bitów → float
  - "/" zwraca int tylko dla dzielenia bez reszty
  - "%" obcina operandy do int, znak wyniku = znak dzielnej
  - stringi numeryczne liczą się jak liczby, wiodąco-numeryczne z ostrzeżeniem
    w logu; nienumeryczne w arytmetyce i bitowych → TypeError
  - porównania luźne wg reguł PHP 8, "===" rozróżnia bool/int/float
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable

logger = logging.getLogger("static_reflection.evaluator")

INT_MAX = 2 ** 63 - 1
INT_MIN = -(2 ** 63)
INT_SIZE = 8
FLOAT_PRECISION = 14

_NUMERIC_RE = re.compile(
    r"^[ \t\n\r\v\f]*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)[ \t\n\r\v\f]*$"
)
_LEADING_NUMERIC_RE = re.compile(
    r"^[ \t\n\r\v\f]*([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_INT_KEY_RE = re.compile(r"0|-?[1-9][0-9]*")


# ─────────────────────────── Typy i konwersje ────────────────────────────

def php_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "array"
    return type(value).__name__


def _wrap_int(value: int) -> int:
    """Obcięcie do 64 bitów ze znakiem (jak rejestr)."""
    value &= 0xFFFFFFFFFFFFFFFF
    return value - 2 ** 64 if value > INT_MAX else value


def _int_or_float(value: int) -> int | float:
    if INT_MIN <= value <= INT_MAX:
        return value
    return float(value)


def _parse_number(text: str) -> int | float:
    if any(c in text for c in ".eE"):
        return float(text)
    return _int_or_float(int(text))


def numeric_value(text: str) -> int | float | None:
    """Wartość stringu numerycznego lub None."""
    m = _NUMERIC_RE.match(text)
    if not m:
        return None
    return _parse_number(m.group(1))


def is_numeric_string(value: Any) -> bool:
    return isinstance(value, str) and _NUMERIC_RE.match(value) is not None


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ("", "0")
    if isinstance(value, dict):
        return len(value) > 0
    return bool(value)


def to_number(value: Any, op: str = "") -> int | float:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        number = numeric_value(value)
        if number is not None:
            return number
        m = _LEADING_NUMERIC_RE.match(value)
        if m:
            logger.warning("A non-numeric value encountered: %r", value)
            return _parse_number(m.group(1))
    raise TypeError(f"Unsupported operand types: {php_type_name(value)} {op}".strip())


def to_int(value: Any, op: str = "") -> int:
    number = to_number(value, op)
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            return 0
        return _wrap_int(int(number))
    return number


def _float_to_string(value: float) -> str:
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    text = format(value, f".{FLOAT_PRECISION}G")
    if "E" in text:
        mantissa, exponent = text.split("E")
        if "." not in mantissa:
            mantissa += ".0"
        sign = "-" if exponent.startswith("-") else "+"
        text = f"{mantissa}E{sign}{int(exponent.lstrip('+-'))}"
    return text


def to_string(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_to_string(value)
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        logger.warning("Array to string conversion")
        return "Array"
    raise TypeError(f"Object of type {php_type_name(value)} could not be converted to string")


def normalize_array_key(key: Any) -> int | str:
    """Klucz tablicy PHP: "8" → 8, True → 1, 1.7 → 1, None → ""."""
    if key is None:
        return ""
    if isinstance(key, bool):
        return int(key)
    if isinstance(key, int):
        return key
    if isinstance(key, float):
        return to_int(key)
    if isinstance(key, str):
        if _INT_KEY_RE.fullmatch(key):
            as_int = int(key)
            if INT_MIN <= as_int <= INT_MAX:
                return as_int
        return key
    raise TypeError(f"Illegal offset type: {php_type_name(key)}")


# ─────────────────────────── Arytmetyka ──────────────────────────────────

def _unsupported(value: Any) -> bool:
    if isinstance(value, str):
        return _LEADING_NUMERIC_RE.match(value) is None
    return isinstance(value, dict)


def _check_operands(a: Any, b: Any, op: str) -> None:
    if _unsupported(a) or _unsupported(b):
        raise TypeError(
            f"Unsupported operand types: {php_type_name(a)} {op} {php_type_name(b)}"
        )


def _arith(a: Any, b: Any, op: str, fn: Callable[[Any, Any], Any]) -> int | float:
    _check_operands(a, b, op)
    x, y = to_number(a, op), to_number(b, op)
    result = fn(x, y)
    if isinstance(result, int):
        return _int_or_float(result)
    return result


def add(a: Any, b: Any) -> Any:
    if isinstance(a, dict) and isinstance(b, dict):
        union = dict(a)
        for key, value in b.items():
            union.setdefault(key, value)
        return union
    return _arith(a, b, "+", lambda x, y: x + y)


def sub(a: Any, b: Any) -> int | float:
    return _arith(a, b, "-", lambda x, y: x - y)


def mul(a: Any, b: Any) -> int | float:
    return _arith(a, b, "*", lambda x, y: x * y)


def div(a: Any, b: Any) -> int | float:
    _check_operands(a, b, "/")
    x, y = to_number(a, "/"), to_number(b, "/")
    if y == 0:
        raise ZeroDivisionError("Division by zero")
    if isinstance(x, int) and isinstance(y, int):
        if x % y == 0:
            return _int_or_float(x // y)
        return x / y
    return float(x) / float(y)


def mod(a: Any, b: Any) -> int:
    _check_operands(a, b, "%")
    x, y = to_int(a, "%"), to_int(b, "%")
    if y == 0:
        raise ZeroDivisionError("Modulo by zero")
    result = abs(x) % abs(y)
    return -result if x < 0 else result


def power(a: Any, b: Any) -> int | float:
    _check_operands(a, b, "**")
    x, y = to_number(a, "**"), to_number(b, "**")
    if isinstance(x, int) and isinstance(y, int) and y >= 0:
        # duże wykładniki liczymy od razu na float (bez budowania ogromnych int)
        if abs(x) < 2 or y * math.log2(abs(x)) < 64:
            return _int_or_float(x ** y)
    if x == 0 and y < 0:
        return math.inf
    try:
        return math.pow(x, y)
    except OverflowError:
        negative = x < 0 and float(y).is_integer() and int(y) % 2 == 1
        return -math.inf if negative else math.inf
    except ValueError:
        return math.nan


def negate(a: Any) -> int | float:
    return mul(a, -1)


def identity(a: Any) -> int | float:
    return mul(a, 1)


# ─────────────────────────── Bitowe ──────────────────────────────────────

def _string_bitwise(a: str, b: str, fn: Callable[[int, int], int], pad: bool) -> str:
    if pad:
        width = max(len(a), len(b))
        a, b = a.ljust(width, "\0"), b.ljust(width, "\0")
    return "".join(chr(fn(ord(x), ord(y)) & 0xFF) for x, y in zip(a, b))


def bitwise_or(a: Any, b: Any) -> int | str:
    if isinstance(a, str) and isinstance(b, str):
        return _string_bitwise(a, b, lambda x, y: x | y, pad=True)
    _check_operands(a, b, "|")
    return to_int(a, "|") | to_int(b, "|")


def bitwise_and(a: Any, b: Any) -> int | str:
    if isinstance(a, str) and isinstance(b, str):
        return _string_bitwise(a, b, lambda x, y: x & y, pad=False)
    _check_operands(a, b, "&")
    return to_int(a, "&") & to_int(b, "&")


def bitwise_xor(a: Any, b: Any) -> int | str:
    if isinstance(a, str) and isinstance(b, str):
        return _string_bitwise(a, b, lambda x, y: x ^ y, pad=False)
    _check_operands(a, b, "^")
    return to_int(a, "^") ^ to_int(b, "^")


def bitwise_not(a: Any) -> int | str:
    if isinstance(a, str):
        return "".join(chr(~ord(c) & 0xFF) for c in a)
    if isinstance(a, float):
        return ~to_int(a)
    if isinstance(a, int) and not isinstance(a, bool):
        return ~a
    raise TypeError(f"Cannot perform bitwise not on {php_type_name(a)}")


def shift_left(a: Any, b: Any) -> int:
    _check_operands(a, b, "<<")
    x, y = to_int(a, "<<"), to_int(b, "<<")
    if y < 0:
        raise ArithmeticError("Bit shift by negative number")
    if y >= INT_SIZE * 8:
        return 0
    return _wrap_int(x << y)


def shift_right(a: Any, b: Any) -> int:
    _check_operands(a, b, ">>")
    x, y = to_int(a, ">>"), to_int(b, ">>")
    if y < 0:
        raise ArithmeticError("Bit shift by negative number")
    if y >= INT_SIZE * 8:
        return 0 if x >= 0 else -1
    return x >> y


def concat(a: Any, b: Any) -> str:
    return to_string(a) + to_string(b)


# ─────────────────────────── Porównania ──────────────────────────────────

def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _compare_numbers(a: int | float, b: int | float) -> int:
    if (isinstance(a, float) and math.isnan(a)) or (isinstance(b, float) and math.isnan(b)):
        return 1  # nieporównywalne
    return (a > b) - (a < b)


def _compare_strings(a: str, b: str) -> int:
    return (a > b) - (a < b)


def loose_compare(a: Any, b: Any) -> int:
    """Odpowiednik operatora <=> (PHP 8). 1 oznacza także 'nieporównywalne'."""
    if isinstance(a, str) and b is None:
        return _compare_strings(a, "")
    if a is None and isinstance(b, str):
        return _compare_strings("", b)
    if isinstance(a, bool) or isinstance(b, bool) or a is None or b is None:
        return int(to_bool(a)) - int(to_bool(b))
    if isinstance(a, dict) or isinstance(b, dict):
        if not isinstance(a, dict):
            return -1
        if not isinstance(b, dict):
            return 1
        if len(a) != len(b):
            return _sign(len(a) - len(b))
        for key, value in a.items():
            if key not in b:
                return 1
            result = loose_compare(value, b[key])
            if result != 0:
                return result
        return 0
    if isinstance(a, str) and isinstance(b, str):
        x, y = numeric_value(a), numeric_value(b)
        if x is not None and y is not None:
            return _compare_numbers(x, y)
        return _compare_strings(a, b)
    if isinstance(a, str):
        x = numeric_value(a)
        if x is None:
            return _compare_strings(a, to_string(b))
        return _compare_numbers(x, b)
    if isinstance(b, str):
        y = numeric_value(b)
        if y is None:
            return _compare_strings(to_string(a), b)
        return _compare_numbers(a, y)
    return _compare_numbers(a, b)


def loose_equals(a: Any, b: Any) -> bool:
    return loose_compare(a, b) == 0


def is_identical(a: Any, b: Any) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        if list(a.keys()) != list(b.keys()):
            return False
        return all(is_identical(a[key], b[key]) for key in a)
    return a == b


def smaller(a: Any, b: Any) -> bool:
    return loose_compare(a, b) < 0


def smaller_or_equal(a: Any, b: Any) -> bool:
    return loose_compare(a, b) <= 0


def greater(a: Any, b: Any) -> bool:
    # PHP liczy a > b jako b < a
    return loose_compare(b, a) < 0


def greater_or_equal(a: Any, b: Any) -> bool:
    return loose_compare(b, a) <= 0


# Operatory, których oba operandy są zawsze wyliczane przed zastosowaniem.
# Logiczne (&&, ||, and, or), "??" i ternary obsługuje ewaluator (leniwie).
BINARY_OPS: dict[str, Callable[[Any, Any], Any]] = {
    "+":   add,
    "-":   sub,
    "*":   mul,
    "/":   div,
    "%":   mod,
    "**":  power,
    "|":   bitwise_or,
    "&":   bitwise_and,
    "^":   bitwise_xor,
    "<<":  shift_left,
    ">>":  shift_right,
    ".":   concat,
    "xor": lambda a, b: to_bool(a) != to_bool(b),
    "<":   smaller,
    "<=":  smaller_or_equal,
    ">":   greater,
    ">=":  greater_or_equal,
    "==":  loose_equals,
    "!=":  lambda a, b: not loose_equals(a, b),
    "<>":  lambda a, b: not loose_equals(a, b),
    "===": is_identical,
    "!==": lambda a, b: not is_identical(a, b),
    "<=>": loose_compare,
}

UNARY_OPS: dict[str, Callable[[Any], Any]] = {
    "!": lambda a: not to_bool(a),
    "~": bitwise_not,
    "-": negate,
    "+": identity,
}
