"""Stackrouter: a hierarchical client-side URL router.

Parses a pathname into a stack of blocks of contexts, and re-evaluates
nested selectors incrementally on every navigation.

Basic usage::

    from stackrouter import MemoryHistory, Router

    router = Router(MemoryHistory("/users"))
    users = router.create_notifier(["users"])
    user = users.child([{"": str.isdigit}])
    user.subscribe(lambda checkpoint: print("user matched:", checkpoint is not None))

    router.navigate("/users/=42")   # user matched: True
    router.route.stack[0][0].name   # "users"

Parsing only::

    from stackrouter import parse_stack, stringify_stack
    stack = parse_stack("/users/user/=123/~/edit/tab=delete")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ABSENT",
    "START",
    "AlreadyInitializedError",
    "Block",
    "Checkpoint",
    "Configuration",
    "ConfigurationError",
    "Context",
    "DisposedError",
    "History",
    "Location",
    "MemoryHistory",
    "Notifier",
    "NotifierTree",
    "Params",
    "Route",
    "Router",
    "Rule",
    "RuleError",
    "Stack",
    "StackRouterError",
    "compile_rule",
    "get_router",
    "init_router",
    "install_router",
    "load_configuration",
    "parse_hash",
    "parse_search",
    "parse_stack",
    "select",
    "stringify_stack",
    "teardown_router",
]

# Public name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "ABSENT": "stackrouter.selector.rule",
    "START": "stackrouter.selector.engine",
    "AlreadyInitializedError": "stackrouter.errors",
    "Block": "stackrouter.routing.model",
    "Checkpoint": "stackrouter.selector.engine",
    "Configuration": "stackrouter.config",
    "ConfigurationError": "stackrouter.errors",
    "Context": "stackrouter.routing.model",
    "DisposedError": "stackrouter.errors",
    "History": "stackrouter.history",
    "Location": "stackrouter.routing.route",
    "MemoryHistory": "stackrouter.history",
    "Notifier": "stackrouter.selector.notifier",
    "NotifierTree": "stackrouter.selector.notifier",
    "Params": "stackrouter.routing.params",
    "Route": "stackrouter.routing.route",
    "Router": "stackrouter.router",
    "Rule": "stackrouter.selector.rule",
    "RuleError": "stackrouter.errors",
    "Stack": "stackrouter.routing.model",
    "StackRouterError": "stackrouter.errors",
    "compile_rule": "stackrouter.selector.rule",
    "get_router": "stackrouter.context",
    "init_router": "stackrouter.context",
    "install_router": "stackrouter.context",
    "load_configuration": "stackrouter.config",
    "parse_hash": "stackrouter.routing.parser",
    "parse_search": "stackrouter.routing.parser",
    "parse_stack": "stackrouter.routing.parser",
    "select": "stackrouter.selector.engine",
    "stringify_stack": "stackrouter.routing.parser",
    "teardown_router": "stackrouter.context",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import stackrouter`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
