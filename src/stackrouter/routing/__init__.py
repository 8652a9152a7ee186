"""Routing model: a pathname as a stack of blocks of contexts.

Parsing is pure and total. Serialization is its inverse for every stack
the parser produces.
"""

from stackrouter.routing.model import Block, Context, Stack
from stackrouter.routing.params import Params
from stackrouter.routing.parser import (
    parse_block,
    parse_context,
    parse_hash,
    parse_search,
    parse_stack,
    stringify_block,
    stringify_context,
    stringify_hash,
    stringify_search,
    stringify_stack,
)
from stackrouter.routing.route import Location, Route

__all__ = [
    "Block",
    "Context",
    "Location",
    "Params",
    "Route",
    "Stack",
    "parse_block",
    "parse_context",
    "parse_hash",
    "parse_search",
    "parse_stack",
    "stringify_block",
    "stringify_context",
    "stringify_hash",
    "stringify_search",
    "stringify_stack",
]
