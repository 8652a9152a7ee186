"""The router, the navigation authority.

Holds the current ``Route``, commits navigation through a ``History``
collaborator, and owns the root of the notifier tree.

Usage::

    router = Router(MemoryHistory("/users"))
    users = router.create_notifier(["users"])
    detail = users.child([{"": re.compile(r"\\d+")}])
    router.navigate("/users/=42")
    assert detail.matched

Navigation is synchronous: ``navigate()`` rebuilds the route, runs the
whole notifier cascade and calls route listeners before it returns.

Re-entrant navigation (a subscriber calling ``navigate()`` during a
cascade) is queued: the request is recorded and processed, in order,
after the running cascade finishes and before the outer ``navigate()``
returns. Each queued navigation gets its own complete cascade.
"""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from stackrouter.config import Configuration, load_configuration
from stackrouter.errors import DisposedError
from stackrouter.history import History, MemoryHistory
from stackrouter.routing.route import Location, Route
from stackrouter.selector.engine import START, Checkpoint, select
from stackrouter.selector.notifier import Notifier, NotifierTree
from stackrouter.selector.rule import RawRule, compile_rule

logger = logging.getLogger("stackrouter.router")

type RouteListener = Callable[[Route], None]


@dataclass(frozen=True, slots=True)
class _Pending:
    """A navigation requested while a cascade was running."""

    path: str | None
    replace: bool
    state: Any


class Router:
    """Navigation authority: current route, history, notifier tree.

    An explicit object rather than a process-wide global; see
    ``stackrouter.context`` for installing one as the active router.
    """

    __slots__ = (
        "_configuration",
        "_dispatching",
        "_history",
        "_listeners",
        "_pending",
        "_route",
        "_tree",
        "_unlisten",
    )

    def __init__(
        self,
        history: History | None = None,
        configuration: Configuration | None = None,
    ) -> None:
        self._configuration = load_configuration(configuration)
        self._history: History = history if history is not None else MemoryHistory()
        self._route = Route.from_location(self._history.location, self._configuration)
        self._tree = NotifierTree(lambda: self._route)
        self._listeners: list[RouteListener] = []
        self._pending: deque[_Pending] = deque()
        self._dispatching = False
        self._unlisten: Callable[[], None] | None = self._history.listen(self._on_pop)

    @property
    def route(self) -> Route:
        """The current, immutable route."""
        return self._route

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def history(self) -> History:
        return self._history

    @property
    def root(self) -> Notifier:
        """Root of the notifier tree, seeded with ``START``."""
        self._check_open()
        return self._tree.root

    @property
    def closed(self) -> bool:
        return self._unlisten is None

    # -- Navigation --

    def navigate(self, path: str, *, replace: bool = False, state: Any = None) -> None:
        """Commit *path* to history, rebuild the route and notify.

        ``replace=True`` replaces the current history entry instead of
        pushing a new one. *state* is passed through to the history.
        """
        self._check_open()
        self._enqueue(_Pending(path, replace, state))

    def sync(self) -> None:
        """Rebuild from the history's current location without committing.

        Used when the location changed outside the router (back/forward).
        """
        self._check_open()
        self._enqueue(_Pending(None, False, None))

    def _on_pop(self, location: Location) -> None:
        logger.debug("History moved to %s", location)
        self.sync()

    def _enqueue(self, pending: _Pending) -> None:
        self._pending.append(pending)
        if self._dispatching:
            logger.debug("Queued re-entrant navigation to %r", pending.path)
            return

        self._dispatching = True
        try:
            while self._pending:
                self._apply(self._pending.popleft())
        except Exception:
            self._pending.clear()
            logger.exception("Navigation cascade failed")
            raise
        finally:
            self._dispatching = False

    def _apply(self, pending: _Pending) -> None:
        if pending.path is not None:
            if pending.replace:
                self._history.replace(pending.path, pending.state)
            else:
                self._history.push(pending.path, pending.state)
        self._route = Route.from_location(self._history.location, self._configuration)
        logger.debug("Navigated to %s", self._route)

        self._tree.seed(START)
        for listener in tuple(self._listeners):
            listener(self._route)

    # -- Matching --

    def select(self, rule: RawRule, checkpoint: Checkpoint | None = START) -> Checkpoint | None:
        """Match *rule* against the current route from *checkpoint*."""
        compiled = compile_rule(rule, self._configuration)
        return select(self._route.stack, compiled, checkpoint)

    def matches(self, rule: RawRule) -> bool:
        """True when *rule* matches the current route from ``START``."""
        return self.select(rule) is not None

    def create_notifier(self, rule: RawRule, parent: Notifier | None = None) -> Notifier:
        """Create a notifier for *rule* under *parent* (the root by default)."""
        self._check_open()
        return self._tree.create(parent, rule)

    # -- Listeners --

    def subscribe(self, callback: RouteListener, *, call: bool = False) -> Callable[[], None]:
        """Call *callback(route)* after every route change; returns an unsubscribe.

        With ``call=True`` the callback also runs once, immediately, with
        the current route.
        """
        self._listeners.append(callback)
        if call:
            callback(self._route)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # -- Lifecycle --

    def close(self) -> None:
        """Detach from history and dispose every notifier. Idempotent."""
        if self._unlisten is None:
            return
        self._unlisten()
        self._unlisten = None
        self._tree.close()
        self._listeners.clear()
        self._pending.clear()
        logger.debug("Router closed")

    def _check_open(self) -> None:
        if self._unlisten is None:
            msg = "Router has been closed"
            raise DisposedError(msg)

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"route={self._route.href!r}"
        return f"<Router {state}>"
