"""
Wbudowane stałe i klasy natywne — to, co w działającym interpreterze
byłoby zdefiniowane zanim załaduje się jakikolwiek plik użytkownika.

Stałe globalne są wrażliwe na wielkość liter, nazwy klas — nie.
"""
from __future__ import annotations

import math
import sys
from typing import Any, Optional

from adapters.evaluator.php_operators import INT_MAX, INT_MIN, INT_SIZE
from adapters.reflection.builtin_class_reflection import BuiltinClassReflection

DEFAULT_PHP_VERSION = "8.2.0"


def version_constants(php_version: str) -> dict[str, Any]:
    """'8.2.7' → PHP_VERSION, PHP_MAJOR_VERSION, PHP_MINOR_VERSION, ..."""
    parts = [int(p) if p.isdigit() else 0 for p in php_version.split(".")[:3]]
    parts += [0] * (3 - len(parts))
    major, minor, release = parts
    return {
        "PHP_VERSION": php_version,
        "PHP_MAJOR_VERSION": major,
        "PHP_MINOR_VERSION": minor,
        "PHP_RELEASE_VERSION": release,
        "PHP_VERSION_ID": major * 10000 + minor * 100 + release,
    }


CONSTANTS: dict[str, Any] = {
    **version_constants(DEFAULT_PHP_VERSION),
    "PHP_EOL": "\n",
    "PHP_INT_MAX": INT_MAX,
    "PHP_INT_MIN": INT_MIN,
    "PHP_INT_SIZE": INT_SIZE,
    "PHP_FLOAT_EPSILON": sys.float_info.epsilon,
    "PHP_FLOAT_MAX": sys.float_info.max,
    "PHP_FLOAT_MIN": sys.float_info.min,
    "PHP_FLOAT_DIG": 15,
    "PHP_OS": "Linux",
    "PHP_OS_FAMILY": "Linux",
    "DIRECTORY_SEPARATOR": "/",
    "PATH_SEPARATOR": ":",
    "NAN": math.nan,
    "INF": math.inf,
    "M_PI": math.pi,
    "M_E": math.e,
    "M_SQRT2": math.sqrt(2),
    "E_ERROR": 1,
    "E_WARNING": 2,
    "E_PARSE": 4,
    "E_NOTICE": 8,
    "E_USER_ERROR": 256,
    "E_USER_WARNING": 512,
    "E_USER_NOTICE": 1024,
    "E_STRICT": 2048,
    "E_DEPRECATED": 8192,
    "E_USER_DEPRECATED": 16384,
    "E_ALL": 32767,
    "SORT_REGULAR": 0,
    "SORT_NUMERIC": 1,
    "SORT_STRING": 2,
    "SORT_FLAG_CASE": 8,
    "COUNT_NORMAL": 0,
    "COUNT_RECURSIVE": 1,
    "JSON_HEX_TAG": 1,
    "JSON_PRETTY_PRINT": 128,
    "JSON_UNESCAPED_SLASHES": 64,
    "JSON_UNESCAPED_UNICODE": 256,
    "JSON_THROW_ON_ERROR": 4194304,
    "ENT_QUOTES": 3,
    "PREG_SPLIT_NO_EMPTY": 1,
}

# nazwa, stałe, rodzic, interfejsy, czy interfejs
_CLASS_TABLE: list[tuple[str, dict[str, Any], Optional[str], tuple[str, ...], bool]] = [
    ("Traversable", {}, None, (), True),
    ("Iterator", {}, None, ("Traversable",), True),
    ("IteratorAggregate", {}, None, ("Traversable",), True),
    ("ArrayAccess", {}, None, (), True),
    ("Countable", {}, None, (), True),
    ("JsonSerializable", {}, None, (), True),
    ("Stringable", {}, None, (), True),
    ("Throwable", {}, None, ("Stringable",), True),
    ("DateTimeInterface", {
        "ATOM": "Y-m-d\\TH:i:sP",
        "COOKIE": "l, d-M-Y H:i:s T",
        "ISO8601": "Y-m-d\\TH:i:sO",
        "RFC822": "D, d M y H:i:s O",
        "RFC2822": "D, d M Y H:i:s O",
        "RFC3339": "Y-m-d\\TH:i:sP",
        "RFC3339_EXTENDED": "Y-m-d\\TH:i:s.vP",
        "RSS": "D, d M Y H:i:s O",
        "W3C": "Y-m-d\\TH:i:sP",
    }, None, (), True),
    ("DateTime", {}, None, ("DateTimeInterface",), False),
    ("DateTimeImmutable", {}, None, ("DateTimeInterface",), False),
    ("Exception", {}, None, ("Throwable",), False),
    ("ErrorException", {}, "Exception", (), False),
    ("LogicException", {}, "Exception", (), False),
    ("InvalidArgumentException", {}, "LogicException", (), False),
    ("RuntimeException", {}, "Exception", (), False),
    ("ArrayObject", {"STD_PROP_LIST": 1, "ARRAY_AS_PROPS": 2}, None,
     ("IteratorAggregate", "ArrayAccess", "Countable"), False),
    ("ArrayIterator", {"STD_PROP_LIST": 1, "ARRAY_AS_PROPS": 2}, None,
     ("Iterator", "ArrayAccess", "Countable"), False),
    ("PDO", {
        "PARAM_NULL": 0,
        "PARAM_INT": 1,
        "PARAM_STR": 2,
        "PARAM_BOOL": 5,
        "FETCH_ASSOC": 2,
        "FETCH_NUM": 3,
        "FETCH_BOTH": 4,
        "FETCH_OBJ": 5,
        "FETCH_COLUMN": 7,
        "ATTR_ERRMODE": 3,
        "ERRMODE_SILENT": 0,
        "ERRMODE_WARNING": 1,
        "ERRMODE_EXCEPTION": 2,
    }, None, (), False),
    ("ReflectionMethod", {
        "IS_STATIC": 16,
        "IS_PUBLIC": 1,
        "IS_PROTECTED": 2,
        "IS_PRIVATE": 4,
        "IS_ABSTRACT": 64,
        "IS_FINAL": 32,
    }, None, (), False),
]


def _build_classes() -> dict[str, BuiltinClassReflection]:
    classes: dict[str, BuiltinClassReflection] = {}
    for name, constants, parent, interfaces, is_interface in _CLASS_TABLE:
        classes[name.lower()] = BuiltinClassReflection(
            name,
            constants=constants,
            parent=parent,
            interfaces=interfaces,
            is_interface=is_interface,
            lookup=get_class,
        )
    return classes


_CLASSES: dict[str, BuiltinClassReflection] = {}


def get_class(name: str) -> Optional[BuiltinClassReflection]:
    """Klasa natywna po nazwie (bez wiodącego '\\', bez rozróżniania wielkości liter)."""
    return _CLASSES.get(name.lstrip("\\").lower())


_CLASSES.update(_build_classes())


def get_constant(name: str, extra: Optional[dict[str, Any]] = None) -> tuple[bool, Any]:
    """Stała wbudowana → (found, value). `extra` nadpisuje tablicę domyślną."""
    name = name.lstrip("\\")
    if extra and name in extra:
        return True, extra[name]
    if name in CONSTANTS:
        return True, CONSTANTS[name]
    return False, None
