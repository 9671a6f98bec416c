"""
PHP value serialization for meta values.

WordPress stores arrays and objects in meta tables with PHP's serialize()
and everything else as a plain string. These functions mirror
maybe_serialize() and maybe_unserialize() on top of phpserialize so that
values written here can be read by WordPress and the other way round.
"""

import re
from io import BytesIO
from typing import Any

import phpserialize

SERIALIZED_PATTERN = re.compile(r'^(?:N;|b:[01];|i:-?\d+;|d:[^;]+;|s:\d+:".*";|a:\d+:\{.*\})$', re.S)


def php_serialize(value: Any) -> str:
    """
    Serialize a Python value in PHP serialize() format.

    Lists become arrays with integer keys, dicts arrays with their keys.

    Raises:
        TypeError: For values PHP arrays cannot hold
    """
    return phpserialize.dumps(value, charset="utf-8").decode("utf-8")


def php_unserialize(text: str) -> Any:
    """
    Parse a PHP serialize() string.

    Arrays whose keys are 0..n-1 in order come back as lists, other
    arrays as dicts.

    Raises:
        ValueError: If the text is malformed or has trailing data
    """
    stream = BytesIO(text.encode("utf-8"))
    value = phpserialize.load(stream, charset="utf-8", decode_strings=True)
    if stream.read():
        raise ValueError(f"Trailing data after offset {stream.tell()}")
    return _listify(value)


def _listify(value: Any) -> Any:
    if isinstance(value, dict):
        converted = {key: _listify(item) for key, item in value.items()}
        if list(converted.keys()) == list(range(len(converted))):
            return list(converted.values())
        return converted
    return value


def is_serialized(text: Any) -> bool:
    """Whether a stored meta value looks PHP-serialized."""
    return isinstance(text, str) and bool(SERIALIZED_PATTERN.match(text.strip()))


def maybe_serialize(value: Any) -> str:
    """
    Prepare a value for the meta table.

    Arrays are serialized, scalars stored as strings, and strings that
    already look serialized are serialized again so they survive a read.
    """
    if isinstance(value, (list, tuple, dict)):
        return php_serialize(value)
    if isinstance(value, str) and is_serialized(value):
        return php_serialize(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def maybe_unserialize(text: Any) -> Any:
    """Decode a stored meta value; plain strings are returned unchanged."""
    if not is_serialized(text):
        return text
    try:
        return php_unserialize(text.strip())
    except (ValueError, UnicodeDecodeError):
        return text
