"""Notifier tree: incremental selector re-evaluation.

Each notifier caches one rule's checkpoint, computed from its parent's
checkpoint. When the route changes, the root is reseeded and the tree is
walked depth-first: every node recomputes from its parent's *current*
checkpoint, then its children do the same.

Nodes live in an arena (``NotifierTree._nodes``) keyed by integer
handle. A node stores its parent's handle and its children's handles;
``Notifier`` objects are thin handles into the arena, so there are no
reference cycles between parents and children.

Example::

    route = Route.from_url("/")
    tree = NotifierTree(lambda: route)
    users = tree.create(tree.root, ["users"])
    detail = users.child([{"": re.compile(r"\\d+")}])
    detail.subscribe(lambda checkpoint: print("detail", checkpoint is not None))
    route = Route.from_url("/users/=42")
    tree.seed()  # prints "detail True"

Cascade rules:

- Every checkpoint in the subtree is recomputed first; subscribers run
  afterwards, in depth-first order, so they always observe a consistent
  tree. If subscribers raise, the first error propagates once all of
  them have run.
- Subscribers are called with the new checkpoint only when the node
  switches between matching and not matching.
- A node that was and still is unmatched skips its subtree: every
  descendant is unmatched too.
- Subscribers of nodes disposed by an earlier subscriber are skipped.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from stackrouter.errors import DisposedError
from stackrouter.routing.model import Context
from stackrouter.routing.route import Route
from stackrouter.selector.engine import START, Checkpoint, select
from stackrouter.selector.rule import RawRule, Rule, compile_rule

logger = logging.getLogger("stackrouter.notifier")

type Subscriber = Callable[[Checkpoint | None], None]

ROOT_HANDLE = 0


@dataclass(slots=True)
class _Node:
    """Arena record for one notifier. Mutable; owned by the tree."""

    parent: int | None
    rule: Rule
    checkpoint: Checkpoint | None
    # dict as an insertion-ordered set of handles
    children: dict[int, None] = field(default_factory=dict)
    subscribers: list[Subscriber] = field(default_factory=list)


class NotifierTree:
    """Arena of notifier nodes rooted at a seeded checkpoint.

    *route_source* returns the route every node matches against; it is
    read once per cascade and once per node creation.
    """

    __slots__ = ("_closed", "_next_handle", "_nodes", "_route_source")

    def __init__(self, route_source: Callable[[], Route], checkpoint: Checkpoint = START) -> None:
        self._route_source = route_source
        self._nodes: dict[int, _Node] = {ROOT_HANDLE: _Node(None, Rule(), checkpoint)}
        self._next_handle = ROOT_HANDLE + 1
        self._closed = False

    @property
    def root(self) -> "Notifier":
        return Notifier(self, ROOT_HANDLE)

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        """Number of live notifiers, root included."""
        return len(self._nodes)

    def __contains__(self, notifier: object) -> bool:
        return (
            isinstance(notifier, Notifier)
            and notifier.tree is self
            and notifier.handle in self._nodes
        )

    def create(self, parent: "Notifier | None", rule: RawRule) -> "Notifier":
        """Create a notifier under *parent* (the root when ``None``).

        The rule is compiled with the route's configuration and matched
        immediately against the parent's current checkpoint.
        """
        parent_handle = ROOT_HANDLE if parent is None else self._own(parent)
        parent_node = self._node(parent_handle)
        route = self._route_source()
        compiled = compile_rule(rule, route.configuration)

        handle = self._next_handle
        self._next_handle += 1
        checkpoint = select(route.stack, compiled, parent_node.checkpoint)
        self._nodes[handle] = _Node(parent_handle, compiled, checkpoint)
        parent_node.children[handle] = None
        return Notifier(self, handle)

    def seed(self, checkpoint: Checkpoint = START) -> None:
        """Reset the root to *checkpoint* and run the cascade."""
        self._node(ROOT_HANDLE).checkpoint = checkpoint
        self.notify(ROOT_HANDLE)

    def notify(self, handle: int) -> None:
        """Recompute *handle* from its parent, then its subtree."""
        node = self._node(handle)
        self._cascade(handle, node, self._route_source())

    def dispose(self, handle: int) -> None:
        """Remove *handle* and its whole subtree from the arena.

        Disposing the root closes the tree. Disposing an already
        disposed node is a no-op.
        """
        if handle == ROOT_HANDLE:
            self.close()
            return
        node = self._nodes.get(handle)
        if node is None:
            return
        if node.parent is not None and node.parent in self._nodes:
            self._nodes[node.parent].children.pop(handle, None)
        removed = self._drop(handle)
        logger.debug("Disposed notifier %d (%d nodes removed)", handle, removed)

    def close(self) -> None:
        """Dispose every notifier. The tree cannot be used afterwards."""
        if self._closed:
            return
        self._nodes.clear()
        self._closed = True
        logger.debug("Notifier tree closed")

    # -- Node access used by Notifier handles --

    def checkpoint(self, handle: int) -> Checkpoint | None:
        return self._node(handle).checkpoint

    def rule(self, handle: int) -> Rule:
        return self._node(handle).rule

    def parent(self, handle: int) -> int | None:
        return self._node(handle).parent

    def children(self, handle: int) -> tuple[int, ...]:
        return tuple(self._node(handle).children)

    def subscribe(
        self, handle: int, callback: Subscriber, *, call: bool = False
    ) -> Callable[[], None]:
        """Register *callback* on *handle*; returns an idempotent unsubscribe.

        With ``call=True`` the callback also runs once, immediately, with
        the current checkpoint.
        """
        node = self._node(handle)
        node.subscribers.append(callback)
        if call:
            callback(node.checkpoint)

        def unsubscribe() -> None:
            if callback in node.subscribers:
                node.subscribers.remove(callback)

        return unsubscribe

    def context(self, handle: int) -> Context | None:
        return self._route_source().context_at(self._node(handle).checkpoint)

    # -- Internals --

    def _cascade(self, handle: int, node: _Node, route: Route) -> None:
        transitions: list[tuple[int, Checkpoint | None]] = []
        self._recompute(handle, node, route, transitions)

        # The subtree is consistent before any subscriber runs
        error: Exception | None = None
        for changed, checkpoint in transitions:
            changed_node = self._nodes.get(changed)
            if changed_node is None:
                continue
            for callback in tuple(changed_node.subscribers):
                try:
                    callback(checkpoint)
                except Exception as exc:
                    if error is not None:
                        logger.exception("Subscriber of notifier %d failed", changed)
                        continue
                    error = exc
        if error is not None:
            raise error

    def _recompute(
        self,
        handle: int,
        node: _Node,
        route: Route,
        transitions: list[tuple[int, Checkpoint | None]],
    ) -> None:
        previous = node.checkpoint
        if node.parent is not None:
            parent_checkpoint = self._nodes[node.parent].checkpoint
            node.checkpoint = select(route.stack, node.rule, parent_checkpoint)
        current = node.checkpoint

        if (previous is None) != (current is None):
            transitions.append((handle, current))

        if previous is None and current is None:
            return

        for child in node.children:
            self._recompute(child, self._nodes[child], route, transitions)

    def _drop(self, handle: int) -> int:
        node = self._nodes.pop(handle)
        removed = 1
        for child in node.children:
            if child in self._nodes:
                removed += self._drop(child)
        node.children.clear()
        node.subscribers.clear()
        return removed

    def _node(self, handle: int) -> _Node:
        try:
            return self._nodes[handle]
        except KeyError:
            msg = f"Notifier {handle} has been disposed"
            raise DisposedError(msg) from None

    def _own(self, notifier: "Notifier") -> int:
        if notifier.tree is not self:
            msg = "Parent notifier belongs to a different tree"
            raise ValueError(msg)
        return notifier.handle


class Notifier:
    """Handle to one node of a ``NotifierTree``.

    Usable as a context manager that disposes the node on exit::

        with router.create_notifier(["users"]) as users:
            ...
    """

    __slots__ = ("_handle", "_tree")

    def __init__(self, tree: NotifierTree, handle: int) -> None:
        self._tree = tree
        self._handle = handle

    @property
    def tree(self) -> NotifierTree:
        return self._tree

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def checkpoint(self) -> Checkpoint | None:
        """The current checkpoint, or ``None`` when not matching."""
        return self._tree.checkpoint(self._handle)

    @property
    def matched(self) -> bool:
        return self.checkpoint is not None

    @property
    def rule(self) -> Rule:
        return self._tree.rule(self._handle)

    @property
    def parent(self) -> "Notifier | None":
        parent = self._tree.parent(self._handle)
        return None if parent is None else Notifier(self._tree, parent)

    @property
    def children(self) -> tuple["Notifier", ...]:
        return tuple(Notifier(self._tree, h) for h in self._tree.children(self._handle))

    @property
    def context(self) -> Context | None:
        """The context at this notifier's checkpoint, if any."""
        return self._tree.context(self._handle)

    @property
    def disposed(self) -> bool:
        return self not in self._tree

    def child(self, rule: RawRule) -> "Notifier":
        """Create a notifier nested under this one."""
        return self._tree.create(self, rule)

    def subscribe(self, callback: Subscriber, *, call: bool = False) -> Callable[[], None]:
        """Call *callback(checkpoint)* on each match-state transition.

        ``call=True`` also calls it right away with the current checkpoint.
        """
        return self._tree.subscribe(self._handle, callback, call=call)

    def notify(self) -> None:
        """Recompute from the parent's current checkpoint and propagate."""
        self._tree.notify(self._handle)

    def dispose(self) -> None:
        """Detach from the parent and drop this notifier's subtree."""
        self._tree.dispose(self._handle)

    def __enter__(self) -> "Notifier":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Notifier):
            return NotImplemented
        return self._tree is other._tree and self._handle == other._handle

    def __hash__(self) -> int:
        return hash((id(self._tree), self._handle))

    def __repr__(self) -> str:
        if self.disposed:
            return f"<Notifier {self._handle} disposed>"
        return f"<Notifier {self._handle} checkpoint={self.checkpoint!r}>"
