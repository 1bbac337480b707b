"""Redaction engine: replace selected subtrees before rendering.

Each rule pairs a compiled Selector with a primitive replacement. The
tree is walked once; every rule tracks which of its segments are still
live at the current node (a small NFA, so ``**`` can consume any number
of steps). When several rules match the same node the last declared
one wins. A replaced node's subtree is not visited, and the input tree
is never modified.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from snapcheck.content.model import Content, Integer, Step, StepKind, String, primitive
from snapcheck.redaction.selector import (
    Index,
    Key,
    RecursiveWildcard,
    Segment,
    Selector,
    Wildcard,
    parse_selector,
)

REDACTED_PLACEHOLDER = "[REDACTED]"


@dataclass(frozen=True)
class RedactionRule:
    """A compiled (selector, replacement) pair."""

    selector: Selector
    replacement: Content

    @classmethod
    def of(cls, selector: str | Selector, replacement: Any = REDACTED_PLACEHOLDER) -> RedactionRule:
        """Build a rule from selector text and a plain Python scalar.

        Raises:
            SelectorParseError: If the selector text is malformed.
            TypeError: If the replacement is not a primitive.
        """
        if not isinstance(selector, Selector):
            selector = parse_selector(selector)
        return cls(selector, primitive(replacement))


RuleSpec = Union[
    Mapping[str, Any],
    Iterable[Union[RedactionRule, tuple[Union[str, Selector], Any]]],
]


def compile_rules(rules: RuleSpec | None) -> list[RedactionRule]:
    """Normalize user-supplied redactions into RedactionRule objects.

    Accepts a ``{selector: replacement}`` mapping (insertion order is the
    declaration order), an iterable of RedactionRule objects, or an
    iterable of ``(selector, replacement)`` pairs. All selectors are
    parsed here, so a malformed one fails before any snapshot I/O.
    """
    if rules is None:
        return []
    if isinstance(rules, Mapping):
        return [RedactionRule.of(sel, rep) for sel, rep in rules.items()]
    compiled: list[RedactionRule] = []
    for rule in rules:
        if isinstance(rule, RedactionRule):
            compiled.append(rule)
        else:
            sel, rep = rule
            compiled.append(RedactionRule.of(sel, rep))
    return compiled


def apply(tree: Content, rules: RuleSpec | None) -> Content:
    """Return a copy of ``tree`` with every rule applied.

    Rules matching no node have no effect.
    """
    compiled = compile_rules(rules)
    if not compiled:
        return tree
    states = tuple(_closure(r.selector.segments, {0}) for r in compiled)
    return _walk(tree, compiled, states)


def _walk(
    node: Content,
    rules: list[RedactionRule],
    states: tuple[frozenset[int], ...],
) -> Content:
    replacement: Content | None = None
    for rule, live in zip(rules, states):
        if len(rule.selector.segments) in live:
            replacement = rule.replacement
    if replacement is not None:
        return replacement

    result = node
    for step, child in node.children():
        child_states = tuple(
            _advance(rule.selector.segments, live, step)
            for rule, live in zip(rules, states)
        )
        if not any(child_states):
            continue
        new_child = _walk(child, rules, child_states)
        if new_child is not child:
            result = result.replace_child(step, new_child)
    return result


def _closure(segments: tuple[Segment, ...], live: set[int]) -> frozenset[int]:
    # ``**`` may match zero steps, so it also activates the next segment
    pending = list(live)
    reached = set(live)
    while pending:
        idx = pending.pop()
        if idx < len(segments) and isinstance(segments[idx], RecursiveWildcard):
            if idx + 1 not in reached:
                reached.add(idx + 1)
                pending.append(idx + 1)
    return frozenset(reached)


def _advance(
    segments: tuple[Segment, ...],
    live: frozenset[int],
    step: Step,
) -> frozenset[int]:
    nxt: set[int] = set()
    for idx in live:
        if idx >= len(segments):
            continue
        segment = segments[idx]
        if isinstance(segment, RecursiveWildcard):
            nxt.add(idx)
        elif segment_matches(segment, step):
            nxt.add(idx + 1)
    if not nxt:
        return frozenset()
    return _closure(segments, nxt)


def segment_matches(segment: Segment, step: Step) -> bool:
    """Whether one selector segment accepts one concrete path step."""
    if isinstance(segment, (Wildcard, RecursiveWildcard)):
        return True
    if isinstance(segment, Key):
        if step.kind in (StepKind.FIELD, StepKind.PAYLOAD):
            return step.value == segment.name
        if step.kind is StepKind.KEY:
            return isinstance(step.value, String) and step.value.value == segment.name
        return False
    if isinstance(segment, Index):
        if step.kind is StepKind.INDEX:
            return step.value == segment.index
        if step.kind is StepKind.KEY:
            return isinstance(step.value, Integer) and step.value.value == segment.index
        return False
    return False
