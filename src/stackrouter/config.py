"""Separator configuration.

Configuration is a frozen dataclass: immutable after creation and
validated on construction, so an invalid instance never exists::

    config = load_configuration({"blockSeparator": "!"})
    config.block_separator  # "!"
"""

import string
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from stackrouter.errors import ConfigurationError

# Characters that survive URI encoding untouched
BLOCK_SEPARATORS: frozenset[str] = frozenset("-_'.!~*")

# Characters with a reserved meaning inside a URL
RESERVED_PARAM_SEPARATORS: frozenset[str] = frozenset(";/?:@&+$#")

_ALIASES = {
    "blockSeparator": "block_separator",
    "paramSeparator": "param_separator",
}


@dataclass(frozen=True, slots=True)
class Configuration:
    """Separators used to split a pathname into blocks and properties.

    ``block_separator`` is a whole path segment that starts a new block.
    ``param_separator`` splits a property segment into key and value.
    ``=`` is a reserved URI character but is allowed, and is the default.
    """

    block_separator: str = "~"
    param_separator: str = "="

    def __post_init__(self) -> None:
        block, param = self.block_separator, self.param_separator
        if not isinstance(block, str) or len(block) != 1:
            msg = f"Invalid block_separator, must be a 1 length string. Got: {block!r}."
            raise ConfigurationError(msg)
        if block not in BLOCK_SEPARATORS:
            allowed = "".join(sorted(BLOCK_SEPARATORS))
            msg = f"Invalid block_separator, must be one of {allowed}. Got: {block!r}."
            raise ConfigurationError(msg)
        if not isinstance(param, str) or len(param) != 1:
            msg = f"Invalid param_separator, must be a 1 length string. Got: {param!r}."
            raise ConfigurationError(msg)
        if param in RESERVED_PARAM_SEPARATORS:
            reserved = "".join(sorted(RESERVED_PARAM_SEPARATORS))
            msg = f"Invalid param_separator, must not be any of {reserved}. Got: {param!r}."
            raise ConfigurationError(msg)
        if param == "%":
            msg = "Invalid param_separator, '%' is the percent-encoding escape character."
            raise ConfigurationError(msg)
        if param in string.hexdigits:
            # Escapes are %XX; a hex digit separator would split inside them
            msg = f"Invalid param_separator, must not be a hex digit. Got: {param!r}."
            raise ConfigurationError(msg)
        if param == block:
            msg = f"param_separator and block_separator must differ. Got: {param!r} for both."
            raise ConfigurationError(msg)


DEFAULT_CONFIGURATION = Configuration()


def load_configuration(
    overrides: Configuration | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Configuration:
    """Fill in a partial configuration with the defaults and validate it.

    *overrides* may be a ``Configuration`` (returned as-is when no keyword
    overrides are given), a mapping using snake_case or camelCase keys, or
    ``None``. Keyword arguments win over the mapping.

    Raises ``ConfigurationError`` for unknown keys or invalid values.
    """
    if isinstance(overrides, Configuration):
        if not kwargs:
            return overrides
        base = {f.name: getattr(overrides, f.name) for f in fields(Configuration)}
    else:
        base = {}
        for key, value in (overrides or {}).items():
            base[_normalize_key(key)] = value

    for key, value in kwargs.items():
        base[_normalize_key(key)] = value

    return Configuration(**base)


def _normalize_key(key: str) -> str:
    name = _ALIASES.get(key, key)
    if name not in ("block_separator", "param_separator"):
        msg = f"Unknown configuration key {key!r}. Expected block_separator or param_separator."
        raise ConfigurationError(msg)
    return name
