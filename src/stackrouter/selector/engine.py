"""Selector matching: apply a rule to a stack from a starting checkpoint.

A checkpoint is the last ``(block, context)`` position a rule consumed.
``None`` means no match. Nested selectors resume from their parent's
checkpoint, so a navigation only re-checks each selector's own tokens.
"""

from dataclasses import dataclass

from stackrouter.routing.model import Stack
from stackrouter.selector.rule import Name, NamePattern, NextBlock, PropertyMatch, Root, Rule

BEFORE_FIRST = -1


@dataclass(frozen=True, slots=True)
class Checkpoint:
    """A position in a stack. ``context`` is ``BEFORE_FIRST`` at block start."""

    block: int = 0
    context: int = BEFORE_FIRST

    @property
    def at_start(self) -> bool:
        """True at block 0, before its first context."""
        return self.block == 0 and self.context == BEFORE_FIRST


START = Checkpoint()


def select(stack: Stack, rule: Rule, checkpoint: Checkpoint | None = START) -> Checkpoint | None:
    """Match *rule* against *stack*, starting from *checkpoint*.

    Returns the checkpoint after the last token, or ``None`` when any
    token fails. A ``None`` checkpoint short-circuits to ``None`` without
    looking at the stack.
    """
    if checkpoint is None:
        return None

    block, context = checkpoint.block, checkpoint.context
    for token in rule:
        match token:
            case Root():
                if block != 0 or context != BEFORE_FIRST:
                    return None
            case NextBlock():
                block, context = block + 1, BEFORE_FIRST
                if block >= len(stack):
                    return None
            case Name(value=value):
                context += 1
                if not _in_range(stack, block, context):
                    return None
                if stack[block][context].name != value:
                    return None
            case NamePattern(pattern=pattern):
                context += 1
                if not _in_range(stack, block, context):
                    return None
                if pattern.fullmatch(stack[block][context].name) is None:
                    return None
            case PropertyMatch(matchers=matchers):
                if context == BEFORE_FIRST or not _in_range(stack, block, context):
                    return None
                properties = stack[block][context].properties
                for key, matcher in matchers:
                    if not matcher.test(properties.get(key)):
                        return None

    if (block, context) == (checkpoint.block, checkpoint.context):
        return checkpoint
    return Checkpoint(block, context)


def _in_range(stack: Stack, block: int, context: int) -> bool:
    return block < len(stack) and 0 <= context < len(stack[block])
