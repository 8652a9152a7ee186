"""Stackrouter exception hierarchy.

Shared across configuration, rule compilation, notifiers, and the router
so every module raises and catches the same types.

A selector that does not match is not an error: ``select()`` returns
``None`` for that case.
"""


class StackRouterError(Exception):
    """Base for all stackrouter-specific errors."""


class ConfigurationError(StackRouterError):
    """Raised when separator configuration is invalid.

    Raised at load time. No partially validated configuration is ever
    returned.
    """


class AlreadyInitializedError(StackRouterError):
    """Raised when a second, different router is installed as the active one."""


class RuleError(StackRouterError):
    """Raised when a selector rule contains a token of an unsupported shape.

    Raised by ``compile_rule()`` when the rule is declared, never while
    matching.
    """


class DisposedError(StackRouterError):
    """Raised when a disposed notifier or closed router is used."""
