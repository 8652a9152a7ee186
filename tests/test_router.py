"""Tests for stackrouter.router — navigation authority."""

import logging
import re

import pytest

from stackrouter.config import Configuration
from stackrouter.errors import DisposedError, RuleError
from stackrouter.history import MemoryHistory
from stackrouter.routing.route import Route
from stackrouter.router import Router
from stackrouter.selector.engine import START, Checkpoint


def _router(initial: str = "/") -> Router:
    return Router(MemoryHistory(initial))


class TestRouterInit:
    def test_initial_route_from_history(self) -> None:
        router = _router("/users/=42?tab=a#top")

        assert router.route.stack[0][0].name == "users"
        assert router.route.search == {"tab": "a"}
        assert router.route.hash == "top"

    def test_default_history(self) -> None:
        router = Router()

        assert isinstance(router.history, MemoryHistory)
        assert router.route.stack == ()

    def test_configuration(self) -> None:
        router = Router(MemoryHistory("/a/!/b"), Configuration(block_separator="!"))

        assert len(router.route.stack) == 2
        assert router.configuration.block_separator == "!"

    def test_root_seeded_at_start(self) -> None:
        assert _router().root.checkpoint == START


class TestNavigate:
    def test_push(self) -> None:
        router = _router()
        router.navigate("/users", state={"from": "home"})

        assert router.route.stack[0][0].name == "users"
        assert len(router.history) == 2
        assert router.history.state == {"from": "home"}

    def test_replace(self) -> None:
        router = _router()
        router.navigate("/users", replace=True)

        assert len(router.history) == 1
        assert router.route.href == "/users"

    def test_route_superseded_not_mutated(self) -> None:
        router = _router("/a")
        before = router.route

        router.navigate("/b")

        assert before == Route.from_url("/a")
        assert router.route is not before

    def test_notifiers_recomputed_synchronously(self) -> None:
        router = _router()
        users = router.create_notifier(["users"])
        user = users.child([{"": re.compile(r"\d+")}])

        router.navigate("/users/=42")

        assert users.checkpoint == Checkpoint(0, 0)
        assert user.matched

        router.navigate("/users/=me")

        assert users.matched
        assert not user.matched

    def test_create_notifier_under_parent(self) -> None:
        router = _router("/a/b")
        a = router.create_notifier(["a"])
        b = router.create_notifier(["b"], parent=a)

        assert b.checkpoint == Checkpoint(0, 1)

    def test_invalid_rule_fails_fast(self) -> None:
        router = _router()
        with pytest.raises(RuleError):
            router.create_notifier([None])


class TestSubscribe:
    def test_call_immediately_with_current_route(self) -> None:
        router = _router()
        routes: list[Route] = []

        router.subscribe(routes.append, call=True)

        assert routes == [router.route]

    def test_listener_receives_routes(self) -> None:
        router = _router()
        routes: list[str] = []
        router.subscribe(lambda route: routes.append(route.href))

        router.navigate("/a")
        router.navigate("/b", replace=True)

        assert routes == ["/a", "/b"]

    def test_unsubscribe(self) -> None:
        router = _router()
        routes: list[Route] = []
        unsubscribe = router.subscribe(routes.append)

        unsubscribe()
        unsubscribe()
        router.navigate("/a")

        assert routes == []

    def test_listener_sees_finished_cascade(self) -> None:
        router = _router()
        a = router.create_notifier(["a"])
        seen: list[bool] = []
        router.subscribe(lambda route: seen.append(a.matched))

        router.navigate("/a")

        assert seen == [True]


class TestSelect:
    def test_select_current_route(self) -> None:
        router = _router("/users/user/=123/~/edit")

        assert router.select(["users", "user"]) == Checkpoint(0, 1)
        assert router.select(["edit"], Checkpoint(1, -1)) == Checkpoint(1, 0)
        assert router.select(["x"], None) is None

    def test_matches(self) -> None:
        router = _router("/users")

        assert router.matches(["/", "users"])
        assert not router.matches(["posts"])

    def test_select_uses_configuration(self) -> None:
        router = Router(MemoryHistory("/a/!/b"), Configuration(block_separator="!"))
        assert router.matches(["a", "!", "b"])


class TestExternalNavigation:
    def test_back_and_forward_resync(self) -> None:
        router = _router("/a")
        a = router.create_notifier(["a"])
        router.navigate("/b")
        assert not a.matched

        router.history.back()  # type: ignore[attr-defined]

        assert router.route.href == "/a"
        assert a.matched

        router.history.forward()  # type: ignore[attr-defined]

        assert router.route.href == "/b"

    def test_sync(self) -> None:
        history = MemoryHistory("/a")
        router = Router(history)
        history.replace("/b")

        router.sync()

        assert router.route.href == "/b"


class TestReentrantNavigation:
    def test_navigation_inside_cascade_is_queued(self) -> None:
        router = _router()
        login = router.create_notifier(["login"])
        observed: list[str] = []

        def redirect(checkpoint: Checkpoint | None) -> None:
            if checkpoint is not None:
                router.navigate("/home")
                # Still inside the /login cascade
                observed.append(router.route.href)

        login.subscribe(redirect)
        routes: list[str] = []
        router.subscribe(lambda route: routes.append(route.href))

        router.navigate("/login")

        assert observed == ["/login"]
        assert routes == ["/login", "/home"]
        assert router.route.href == "/home"
        assert not login.matched

    def test_queued_navigations_run_in_order(self) -> None:
        router = _router()
        routes: list[str] = []

        def listener(route: Route) -> None:
            routes.append(route.href)
            if route.href == "/a":
                router.navigate("/b")
                router.navigate("/c", replace=True)

        router.subscribe(listener)
        router.navigate("/a")

        assert routes == ["/a", "/b", "/c"]
        assert [e.location.pathname for e in router.history.entries] == ["/", "/a", "/c"]  # type: ignore[attr-defined]

    def test_listener_error_propagates_and_router_recovers(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        router = _router()

        def boom(route: Route) -> None:
            if route.href == "/bad":
                msg = "listener failed"
                raise RuntimeError(msg)

        router.subscribe(boom)

        with caplog.at_level(logging.ERROR, logger="stackrouter.router"):
            with pytest.raises(RuntimeError, match="listener failed"):
                router.navigate("/bad")

        assert "Navigation cascade failed" in caplog.text

        router.navigate("/good")
        assert router.route.href == "/good"

    def test_notifier_error_leaves_descendants_consistent(self) -> None:
        router = Router(MemoryHistory("/a"))
        parent = router.create_notifier(["a"])
        child = parent.child([])

        def boom(checkpoint: Checkpoint | None) -> None:
            msg = "notifier failed"
            raise RuntimeError(msg)

        parent.subscribe(boom)

        with pytest.raises(RuntimeError, match="notifier failed"):
            router.navigate("/b")
        router.navigate("/c")

        assert not parent.matched
        assert not child.matched


class TestClose:
    def test_close_disposes_everything(self) -> None:
        router = _router()
        a = router.create_notifier(["a"])

        router.close()

        assert router.closed
        assert a.disposed
        with pytest.raises(DisposedError):
            router.navigate("/a")
        with pytest.raises(DisposedError):
            router.create_notifier(["a"])

    def test_close_detaches_history(self) -> None:
        history = MemoryHistory()
        router = Router(history)
        router.navigate("/a")
        router.close()

        history.back()

        assert router.route.href == "/a"

    def test_close_is_idempotent(self) -> None:
        router = _router()
        router.close()
        router.close()

    def test_repr(self) -> None:
        router = _router("/a")
        assert repr(router) == "<Router route='/a'>"
        router.close()
        assert repr(router) == "<Router closed>"
