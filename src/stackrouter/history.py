"""History collaborators.

The router never touches a real browser. It talks to anything that
implements the ``History`` protocol: push/replace a path, expose the
current location, and report externally driven moves (back/forward)
through ``listen()``.

``MemoryHistory`` is the in-process implementation, used by default and
in tests.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from stackrouter.routing.route import Location

type PopListener = Callable[[Location], None]


@runtime_checkable
class History(Protocol):
    """Structural interface for a session history."""

    @property
    def location(self) -> Location: ...
    def push(self, path: str, state: Any = None) -> None: ...
    def replace(self, path: str, state: Any = None) -> None: ...
    def listen(self, listener: PopListener) -> Callable[[], None]: ...


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    location: Location
    state: Any = None


class MemoryHistory:
    """An in-memory session history with back/forward support.

    ``push`` and ``replace`` never notify listeners, the same way
    ``pushState`` never fires ``popstate``. ``back``, ``forward`` and
    ``go`` do.
    """

    __slots__ = ("_entries", "_index", "_listeners")

    def __init__(self, initial: str = "/", state: Any = None) -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(Location.from_url(initial), state)]
        self._index = 0
        self._listeners: list[PopListener] = []

    @property
    def location(self) -> Location:
        return self._entries[self._index].location

    @property
    def state(self) -> Any:
        return self._entries[self._index].state

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, path: str, state: Any = None) -> None:
        """Drop forward entries and append *path*."""
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(self._resolve(path), state))
        self._index += 1

    def replace(self, path: str, state: Any = None) -> None:
        self._entries[self._index] = HistoryEntry(self._resolve(path), state)

    def go(self, delta: int) -> bool:
        """Move *delta* entries. Returns False (and does nothing) when out of range."""
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return False
        self._index = target
        location = self.location
        for listener in tuple(self._listeners):
            listener(location)
        return True

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)

    def listen(self, listener: PopListener) -> Callable[[], None]:
        """Call *listener(location)* after every ``go``; returns an unsubscribe."""
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _resolve(self, path: str) -> Location:
        """Resolve *path* against the current location.

        ``?q`` and ``#h`` keep the current pathname; anything else is
        taken as a new path.
        """
        current = self.location
        if path.startswith("#"):
            return Location(current.pathname, current.search, path if path != "#" else "")
        if path.startswith("?"):
            return Location.from_url(f"{current.pathname}{path}")
        return Location.from_url(path)
