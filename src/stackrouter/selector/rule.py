"""Selector rules: compiled, immutable sequences of matcher tokens.

A rule is declared once, as a plain sequence, and compiled up front::

    rule = compile_rule(["/", "users", {"": re.compile(r"\\d+")}, "~", "edit"])

Raw token shapes (with the default ``~`` block separator):

    ``"/"``           -> ``Root``: anchored at the very first position
    ``"~"``           -> ``NextBlock``: move into the next block
    ``"users"``       -> ``Name``: next context is named ``users``
    ``re.Pattern``    -> ``NamePattern``: next context name fully matches
    ``{key: value}``  -> ``PropertyMatch`` on the current context

Property values inside a mapping:

    ``str``/``int``/``float``/``bool`` -> ``Exact`` (coerced to ``str``)
    ``re.Pattern``    -> ``Pattern`` (full match)
    callable          -> ``Predicate`` called with the property value
    ``ABSENT``        -> ``Absent``: the key must not be present

Any other shape raises ``RuleError`` at compile time.
"""

import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from stackrouter.config import DEFAULT_CONFIGURATION, Configuration
from stackrouter.errors import RuleError

# ---------------------------------------------------------------------------
# Property matchers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Exact:
    """Property value equals ``value``."""

    value: str

    def test(self, value: str | None) -> bool:
        return value is not None and value == self.value


@dataclass(frozen=True, slots=True)
class Pattern:
    """Property value fully matches ``pattern``."""

    pattern: re.Pattern[str]

    def test(self, value: str | None) -> bool:
        return value is not None and self.pattern.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class Predicate:
    """``func(value)`` is truthy. Not called when the property is missing."""

    func: Callable[[str], object]

    def test(self, value: str | None) -> bool:
        return value is not None and bool(self.func(value))


@dataclass(frozen=True, slots=True)
class Absent:
    """The property key is missing."""

    def test(self, value: str | None) -> bool:
        return value is None

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()

type PropertyMatcher = Exact | Pattern | Predicate | Absent

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Root:
    """Position must be block 0, before its first context."""

    def __repr__(self) -> str:
        return "ROOT"


@dataclass(frozen=True, slots=True)
class NextBlock:
    """Advance to the start of the next block."""

    def __repr__(self) -> str:
        return "NEXT_BLOCK"


@dataclass(frozen=True, slots=True)
class Name:
    """Advance one context; its name must equal ``value``."""

    value: str


@dataclass(frozen=True, slots=True)
class NamePattern:
    """Advance one context; its name must fully match ``pattern``."""

    pattern: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class PropertyMatch:
    """Every ``(key, matcher)`` pair must pass on the current context."""

    matchers: tuple[tuple[str, PropertyMatcher], ...]


ROOT = Root()
NEXT_BLOCK = NextBlock()

type Token = Root | NextBlock | Name | NamePattern | PropertyMatch

_TOKEN_TYPES = (Root, NextBlock, Name, NamePattern, PropertyMatch)
_MATCHER_TYPES = (Exact, Pattern, Predicate, Absent)


@dataclass(frozen=True, slots=True)
class Rule:
    """A compiled selector rule. Immutable and hashable."""

    tokens: tuple[Token, ...] = ()

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


type RawRule = Rule | Sequence[Any]


def compile_rule(raw: RawRule, configuration: Configuration = DEFAULT_CONFIGURATION) -> Rule:
    """Compile a raw rule declaration into a ``Rule``.

    A ``Rule`` is returned unchanged. A bare string is rejected: wrap a
    single name in a list (``["users"]``) so ``"users"`` is not read as
    five one-character tokens.
    """
    if isinstance(raw, Rule):
        return raw
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        msg = f"A rule must be a sequence of tokens, got {type(raw).__name__}: {raw!r}"
        raise RuleError(msg)
    return Rule(tuple(compile_token(token, configuration) for token in raw))


def compile_token(raw: Any, configuration: Configuration = DEFAULT_CONFIGURATION) -> Token:
    """Compile one raw token. Raises ``RuleError`` for unsupported shapes."""
    if isinstance(raw, _TOKEN_TYPES):
        return raw
    match raw:
        case "/":
            return ROOT
        case str() if raw == configuration.block_separator:
            return NEXT_BLOCK
        case "":
            msg = "Context name tokens must be non-empty strings"
            raise RuleError(msg)
        case str():
            return Name(raw)
        case re.Pattern():
            return NamePattern(raw)
        case Mapping():
            return PropertyMatch(
                tuple((_check_key(key), compile_matcher(value)) for key, value in raw.items())
            )
        case _:
            msg = f"Unsupported rule token {raw!r} of type {type(raw).__name__}"
            raise RuleError(msg)


def compile_matcher(raw: Any) -> PropertyMatcher:
    """Compile one property matcher value."""
    if isinstance(raw, _MATCHER_TYPES):
        return raw
    match raw:
        case str():
            return Exact(raw)
        case bool():
            # Booleans are spelled in lowercase in URLs
            return Exact("true" if raw else "false")
        case int() | float():
            return Exact(str(raw))
        case re.Pattern():
            return Pattern(raw)
        case _ if callable(raw):
            return Predicate(raw)
        case _:
            msg = f"Unsupported property matcher {raw!r} of type {type(raw).__name__}"
            raise RuleError(msg)


def _check_key(key: Any) -> str:
    if not isinstance(key, str):
        msg = f"Property matcher keys must be strings, got {type(key).__name__}: {key!r}"
        raise RuleError(msg)
    return key
