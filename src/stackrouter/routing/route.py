"""Location and Route frozen dataclasses."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlsplit

from stackrouter.config import DEFAULT_CONFIGURATION, Configuration
from stackrouter.routing.model import Context, Stack
from stackrouter.routing.params import Params
from stackrouter.routing.parser import (
    parse_hash,
    parse_search,
    parse_stack,
    stringify_hash,
    stringify_search,
    stringify_stack,
)

if TYPE_CHECKING:
    from stackrouter.selector.engine import Checkpoint


@dataclass(frozen=True, slots=True)
class Location:
    """The parts of a URL a route is built from.

    ``search`` keeps its leading ``?`` and ``hash`` its leading ``#``,
    the way a browser location exposes them.
    """

    pathname: str = "/"
    search: str = ""
    hash: str = ""

    @classmethod
    def from_url(cls, url: str) -> "Location":
        """Split an absolute URL or a bare ``/path?query#hash`` string.

        A bare path that starts with ``//`` is a path with an empty first
        segment, not a scheme-relative URL: ``//users/x`` is ``/users/x``.
        """
        if url.startswith("//"):
            url = "/" + url.lstrip("/")
        parts = urlsplit(url)
        return cls(
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )

    def __str__(self) -> str:
        return f"{self.pathname}{self.search}{self.hash}"


@dataclass(frozen=True, slots=True)
class Route:
    """An immutable, parsed snapshot of a location.

    A new Route is built on every navigation; the previous one is
    superseded, never updated.
    """

    stack: Stack = ()
    search: Params = field(default_factory=Params)
    hash: str = ""
    configuration: Configuration = DEFAULT_CONFIGURATION

    @classmethod
    def from_location(
        cls, location: Location, configuration: Configuration = DEFAULT_CONFIGURATION
    ) -> "Route":
        """Parse *location* at call time.

        The fragment is percent-decoded; ``href`` encodes it again.
        """
        return cls(
            stack=parse_stack(location.pathname, configuration),
            search=parse_search(location.search),
            hash=unquote(parse_hash(location.hash)),
            configuration=configuration,
        )

    @classmethod
    def from_url(cls, url: str, configuration: Configuration = DEFAULT_CONFIGURATION) -> "Route":
        return cls.from_location(Location.from_url(url), configuration)

    @property
    def pathname(self) -> str:
        """The serialized stack; ``/`` for an empty stack."""
        return stringify_stack(self.stack, self.configuration) or "/"

    @property
    def href(self) -> str:
        """Pathname, search and hash. Not a full URL: it has no origin."""
        return f"{self.pathname}{stringify_search(self.search)}{stringify_hash(self.hash)}"

    def context_at(self, checkpoint: "Checkpoint | None") -> Context | None:
        """Return the context a checkpoint points at, or ``None``.

        ``None`` when the checkpoint is no-match, sits before the first
        context of its block, or is out of range for this route.
        """
        if checkpoint is None or checkpoint.context < 0:
            return None
        if checkpoint.block >= len(self.stack):
            return None
        block = self.stack[checkpoint.block]
        if checkpoint.context >= len(block):
            return None
        return block[checkpoint.context]

    def __str__(self) -> str:
        return self.href
