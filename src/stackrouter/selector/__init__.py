"""Selectors: rules matched against a route, cached in a notifier tree."""

from stackrouter.selector.engine import BEFORE_FIRST, START, Checkpoint, select
from stackrouter.selector.notifier import Notifier, NotifierTree
from stackrouter.selector.rule import (
    ABSENT,
    NEXT_BLOCK,
    ROOT,
    Absent,
    Exact,
    Name,
    NamePattern,
    NextBlock,
    Pattern,
    Predicate,
    PropertyMatch,
    Root,
    Rule,
    compile_rule,
)

__all__ = [
    "ABSENT",
    "BEFORE_FIRST",
    "NEXT_BLOCK",
    "ROOT",
    "START",
    "Absent",
    "Checkpoint",
    "Exact",
    "Name",
    "NamePattern",
    "NextBlock",
    "Notifier",
    "NotifierTree",
    "Pattern",
    "Predicate",
    "PropertyMatch",
    "Root",
    "Rule",
    "compile_rule",
    "select",
]
