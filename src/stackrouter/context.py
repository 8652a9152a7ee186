"""The active router, held in a ContextVar.

Provides:
- ``init_router()``: create and install a router, or return the one
  already installed.
- ``install_router()``: install an existing router.
- ``get_router()``: the active router.
- ``teardown_router()``: close and uninstall it.

Rendering layers look the router up here instead of importing a global.
Installing is explicit; if nothing installed a router, ``get_router()``
raises ``LookupError``.
"""

from contextvars import ContextVar

from stackrouter.config import Configuration
from stackrouter.errors import AlreadyInitializedError
from stackrouter.history import History
from stackrouter.router import Router

router_var: ContextVar[Router | None] = ContextVar("stackrouter_router", default=None)
"""The active router. Set by ``init_router()`` / ``install_router()``."""


def get_router() -> Router:
    """Return the active router.

    Raises ``LookupError`` if no router is installed.
    """
    router = router_var.get()
    if router is None:
        msg = "No active router. Call init_router() first."
        raise LookupError(msg)
    return router


def init_router(
    history: History | None = None,
    configuration: Configuration | None = None,
) -> Router:
    """Create and install the active router.

    Idempotent: when a router is already installed it is returned as-is
    and the arguments are ignored, so re-running setup code (hot reload)
    is harmless.
    """
    current = router_var.get()
    if current is not None:
        return current
    router = Router(history, configuration)
    router_var.set(router)
    return router


def install_router(router: Router) -> Router:
    """Install *router* as the active router.

    Re-installing the same router is a no-op. Raises
    ``AlreadyInitializedError`` when a different router is active.
    """
    current = router_var.get()
    if current is router:
        return router
    if current is not None:
        msg = "A different router is already installed. Call teardown_router() first."
        raise AlreadyInitializedError(msg)
    router_var.set(router)
    return router


def teardown_router() -> None:
    """Close and uninstall the active router. No-op when none is installed."""
    router = router_var.get()
    if router is None:
        return
    router.close()
    router_var.set(None)
