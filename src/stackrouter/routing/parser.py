"""Pathname, search and hash parsing, and the inverse serialization.

All functions are pure and never fail: any string has a well-defined
``Stack``. Given the default separators (``~`` and ``=``)::

    parse_stack("/users/user/=123/~/edit/tab=delete/~/confirm")
    -> (
        (Context("users"), Context("user", {"": "123"})),
        (Context("edit", {"tab": "delete"}),),
        (Context("confirm"),),
    )

Rules, in order of precedence:

- Empty segments are dropped (leading, trailing, duplicate slashes).
- Segment 0 of the pathname always starts a context, even when it is
  the block separator itself.
- A later segment equal to the block separator closes the current block
  and is consumed. A separator that would open an empty block is ignored.
- The first segment of every block is a context name, even when it
  contains the parameter separator.
- A later segment without the parameter separator starts a new context;
  a segment with it is a ``key=value`` property of the current context.
"""

from collections.abc import Sequence
from urllib.parse import quote, unquote

from stackrouter.config import DEFAULT_CONFIGURATION, Configuration
from stackrouter.routing.model import Block, Context, Stack
from stackrouter.routing.params import Params

# Left unescaped in fragments, matching encodeURIComponent
_FRAGMENT_SAFE = "!*'()"


def parse_stack(pathname: str, configuration: Configuration = DEFAULT_CONFIGURATION) -> Stack:
    """Parse *pathname* into its stack of blocks."""
    groups: list[list[str]] = []
    for index, segment in enumerate(s for s in pathname.split("/") if s):
        if index == 0:
            groups.append([segment])
        elif segment == configuration.block_separator:
            if groups[-1]:
                groups.append([])
        else:
            groups[-1].append(segment)
    return tuple(parse_block(group, configuration) for group in groups if group)


def parse_block(
    segments: Sequence[str], configuration: Configuration = DEFAULT_CONFIGURATION
) -> Block:
    """Parse the segments of one block into its contexts.

    *segments* must not include the block separator segment.
    """
    separator = configuration.param_separator
    runs: list[list[str]] = []
    for index, segment in enumerate(segments):
        if index == 0 or separator not in segment:
            runs.append([segment])
        else:
            runs[-1].append(segment)
    return tuple(parse_context(run, configuration) for run in runs)


def parse_context(
    segments: Sequence[str], configuration: Configuration = DEFAULT_CONFIGURATION
) -> Context:
    """Parse a run of segments into one context.

    The first segment is the name. Each following segment is split once
    on the parameter separator; without a separator the whole segment is
    the value of the unnamed (``""``) key.
    """
    name, *rest = segments
    separator = configuration.param_separator
    pairs: list[tuple[str, str]] = []
    for segment in rest:
        key, found, value = segment.partition(separator)
        if not found:
            key, value = "", segment
        pairs.append((unquote(key), unquote(value)))
    return Context(name, Params.from_pairs(pairs))


def parse_search(search: str) -> Params:
    """Parse a query string, with or without its leading ``?``."""
    search = search.removeprefix("?")
    pairs: list[tuple[str, str]] = []
    for part in search.split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        pairs.append((unquote(key), unquote(value)))
    return Params.from_pairs(pairs)


def parse_hash(hash: str) -> str:
    """Strip the leading ``#`` from a URL fragment, if present."""
    return hash.removeprefix("#")


# -- Serialization --


def stringify_stack(stack: Stack, configuration: Configuration = DEFAULT_CONFIGURATION) -> str:
    """Serialize *stack* to a pathname with a leading ``/`` and no trailing ``/``.

    An empty stack serializes to ``""``.
    """
    return f"/{configuration.block_separator}".join(
        stringify_block(block, configuration) for block in stack
    )


def stringify_block(block: Block, configuration: Configuration = DEFAULT_CONFIGURATION) -> str:
    """Serialize one block; each context carries its own leading ``/``."""
    return "".join(stringify_context(context, configuration) for context in block)


def stringify_context(
    context: Context, configuration: Configuration = DEFAULT_CONFIGURATION
) -> str:
    """Serialize one context as ``/name/key=value/...``."""
    separator = configuration.param_separator
    parts = [f"/{context.name}"]
    for key, value in context.properties.items():
        parts.append(f"/{_encode(key, separator)}{separator}{_encode(value)}")
    return "".join(parts)


def stringify_search(search: Params) -> str:
    """Serialize search params as ``?key=value&...``, or ``""`` when empty."""
    if not search:
        return ""
    return "?" + "&".join(f"{_encode(k, '=')}={_encode(v)}" for k, v in search.items())


def stringify_hash(hash: str) -> str:
    """Serialize a fragment as a percent-encoded ``#hash``, or ``""`` when empty."""
    return f"#{quote(hash, safe=_FRAGMENT_SAFE)}" if hash else ""


def _encode(text: str, separator: str | None = None) -> str:
    if separator is None or separator not in text:
        return quote(text, safe="")
    # quote() leaves unreserved characters alone; a key must never
    # contain a raw separator or it would split differently on parse.
    escaped = quote(separator, safe="")
    if escaped == separator:
        escaped = f"%{ord(separator):02X}"
    return "".join(escaped if char == separator else quote(char, safe="") for char in text)
