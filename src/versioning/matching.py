"""Version constraint matching.

``VersionSpec`` is the public entry point: it parses constraint text once,
classifies every leaf into a matcher, and answers ``match(version)``.

Leaf classification, in order:

1. ``^...$``          regex over the raw candidate text
2. ``==``, ``>=``...  operator against a parsed VersionOrder
3. ``*``              always true
4. ``1.*.3``          shell-style wildcard, translated to a regex
5. ``1.7*``           prefix match (canonical form ``1.7.*``)
6. ``1.7``            strict equality
7. ``1.7@build``      exact text comparison
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple, Union

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

from .cache import InternRegistry, get_registry
from .comp_op import CompOp, compatible_release_prefix
from .errors import OperatorError, RegexCompileError, VersionParseError
from .parser import needs_tree, split_operator
from .spec_trees import Combinator, ConstraintTree, Node, join, treeify, untreeify
from .version import VersionOrder

logger = logging.getLogger(__name__)


class Matcher:
    """Base class for compiled constraint predicates."""

    def test(self, version: str) -> bool:
        """Return True when ``version`` satisfies the matcher."""
        raise NotImplementedError


class AlwaysTrue(Matcher):
    """Matches every version."""

    def test(self, version: str) -> bool:
        return True


class NeverTrue(Matcher):
    """Matches nothing."""

    def test(self, version: str) -> bool:
        return False


class ExactText(Matcher):
    """Byte-for-byte comparison against the constraint text."""

    def __init__(self, spec: str):
        self.spec = spec

    def test(self, version: str) -> bool:
        return version == self.spec


class RegexMatch(Matcher):
    """Anchored regular expression over the raw candidate text."""

    def __init__(self, pattern: str, source: Optional[str] = None):
        try:
            self.expression = re.compile(pattern)
        except re.error as exc:
            raise RegexCompileError(source or pattern, f"invalid regular expression: {exc}") from exc

    def test(self, version: str) -> bool:
        return self.expression.fullmatch(version) is not None


class OperatorMatch(Matcher):
    """Comparison of the parsed candidate against a bound version."""

    def __init__(self, operator: CompOp, version: VersionOrder):
        self.operator = operator
        self.version = version
        self.prefix: Optional[VersionOrder] = None
        if operator is CompOp.COMPATIBLE_RELEASE:
            self.prefix = compatible_release_prefix(version)

    def test(self, version: str) -> bool:
        return self.operator.evaluate(VersionOrder(version), self.version, self.prefix)


class AllOf(Matcher):
    """True when every child spec matches."""

    def __init__(self, children: Tuple["VersionSpec", ...]):
        self.children = children

    def test(self, version: str) -> bool:
        return all(child.match(version) for child in self.children)


class AnyOf(Matcher):
    """True when at least one child spec matches."""

    def __init__(self, children: Tuple["VersionSpec", ...]):
        self.children = children

    def test(self, version: str) -> bool:
        return any(child.match(version) for child in self.children)


def _classify_operator(leaf: str) -> Tuple[Matcher, bool]:
    operator_str, v_str = split_operator(leaf)
    if v_str.endswith(".*"):
        if operator_str == "!=":
            operator_str = CompOp.NOT_EQUAL_STARTS_WITH.value
        elif operator_str == "~=":
            raise OperatorError(leaf, "invalid operator (~=) with '.*'")
        elif operator_str not in ("=", ">="):
            logger.warning(
                "Using .* with relational operator is superfluous; treating '%s' as '%s%s'",
                leaf,
                operator_str,
                v_str[:-2],
            )
        v_str = v_str[:-2]
    matcher = OperatorMatch(CompOp.from_token(operator_str), VersionOrder(v_str))
    return matcher, operator_str == "=="


def classify(leaf: str) -> Tuple[str, Matcher, bool]:
    """Classify a single leaf token.

    Args:
        leaf: Stripped constraint text with no grouping or combinators.

    Returns:
        Tuple of (canonical text, matcher, is_exact).

    Raises:
        InvalidVersionSpec: (or a subclass) when the leaf is malformed.
    """
    if not leaf:
        raise VersionParseError(leaf, "empty version spec")

    if leaf.startswith("^") or leaf.endswith("$"):
        if not (leaf.startswith("^") and leaf.endswith("$")):
            raise OperatorError(leaf, "regex specs must start with '^' and end with '$'")
        return leaf, RegexMatch(leaf), False

    if leaf[0] in Constants.OPERATOR_START:
        matcher, is_exact = _classify_operator(leaf)
        return leaf, matcher, is_exact

    if leaf == "*":
        return leaf, AlwaysTrue(), False

    if "*" in leaf.rstrip("*"):
        rx = leaf.replace(".", r"\.").replace("+", r"\+").replace("*", r".*")
        return leaf, RegexMatch(rf"^(?:{rx})$", source=leaf), False

    if leaf.endswith("*"):
        vo_str = leaf.rstrip("*").rstrip(".")
        return f"{vo_str}.*", OperatorMatch(CompOp.STARTS_WITH, VersionOrder(vo_str)), False

    if "@" not in leaf:
        return leaf, OperatorMatch(CompOp.STRICT_EQUAL, VersionOrder(leaf)), True

    return leaf, ExactText(leaf), True


class VersionSpec:
    """A parsed, interned version constraint.

    ``VersionSpec(text)`` returns the shared instance for constraints that
    are equal once canonicalized, so ``VersionSpec("1.7.1*") is
    VersionSpec("1.7.1.*")``. Instances are immutable.

    Args:
        spec: Constraint text, a ConstraintTree, or an existing VersionSpec
            (returned unchanged).
        registry: Interning registry; defaults to the active session's
            registry or the process-wide one.

    Raises:
        InvalidVersionSpec: (or a subclass) when the text is malformed.
    """

    __slots__ = ("_raw", "_spec", "_key", "_tree", "_matcher", "_is_exact", "__weakref__")

    def __new__(cls, spec: Union[str, ConstraintTree, "VersionSpec"], registry: Optional[InternRegistry] = None):
        if isinstance(spec, VersionSpec):
            return spec
        if not Constants.INTERN_ENABLED:
            return cls._build(spec, None)
        registry = registry if registry is not None else get_registry()
        alias = spec.strip() if isinstance(spec, str) else None
        if alias is not None:
            cached = registry.lookup_alias(alias)
            if cached is not None:
                return cached
        built = cls._build(spec, registry)
        return registry.get_or_insert(built._key, built, alias=alias)

    @classmethod
    def parse(cls, spec: Union[str, ConstraintTree, "VersionSpec"], registry: Optional[InternRegistry] = None) -> "VersionSpec":
        """Parse constraint text; equivalent to calling the class."""
        return cls(spec, registry)

    @classmethod
    def _build(cls, spec: Union[str, ConstraintTree], registry: Optional[InternRegistry]) -> "VersionSpec":
        if isinstance(spec, ConstraintTree):
            return cls._from_tree(spec, registry)

        raw = spec.strip()
        with Timer() as timer:
            if needs_tree(raw):
                node = treeify(raw)
                if isinstance(node, ConstraintTree):
                    return cls._from_tree(node, registry, raw=raw)
                leaf = node
            else:
                leaf = raw
            canonical, matcher, is_exact = classify(leaf)

        obj = object.__new__(cls)
        obj._raw = raw
        obj._spec = canonical
        obj._key = canonical
        obj._tree = canonical
        obj._matcher = matcher
        obj._is_exact = is_exact
        if is_debug_enabled(logger):
            logger.debug(
                "Parsed version spec",
                extra=extra_context(
                    event="parse",
                    component="matching",
                    action="classify",
                    target=canonical,
                    matcher=type(matcher).__name__,
                    outcome="exact" if is_exact else "range",
                    duration_ms=timer.duration_ms(),
                ),
            )
        return obj

    @classmethod
    def _from_tree(cls, tree: ConstraintTree, registry: Optional[InternRegistry], raw: Optional[str] = None) -> "VersionSpec":
        children = tuple(
            cls(part, registry) if Constants.INTERN_ENABLED else cls._build(part, None)
            for part in tree.parts
        )
        combinator = tree.combinator
        normalized = ConstraintTree(combinator, tuple(child._tree for child in children))
        obj = object.__new__(cls)
        obj._key = untreeify(normalized)
        # Display text joins the children's canonical text as-is.
        obj._spec = combinator.value.join(child._spec for child in children)
        obj._raw = raw if raw is not None else obj._key
        obj._tree = normalized
        obj._matcher = AnyOf(children) if combinator is Combinator.OR else AllOf(children)
        obj._is_exact = False
        return obj

    @property
    def spec(self) -> str:
        """Canonical constraint text."""
        return self._spec

    @property
    def raw_value(self) -> str:
        """Constraint text as first given (stripped)."""
        return self._raw

    @property
    def exact_value(self) -> Optional[str]:
        """Canonical text when the constraint pins one version, else None."""
        return self._spec if self._is_exact else None

    @property
    def is_exact(self) -> bool:
        """True for bare literals, ``==`` constraints and ``@`` exact forms."""
        return self._is_exact

    @property
    def is_tree(self) -> bool:
        """True when the constraint was built from a compound expression."""
        return isinstance(self._tree, ConstraintTree)

    @property
    def tree(self) -> Node:
        """Normalized tree (a leaf string for simple specs)."""
        return self._tree

    @property
    def matcher(self) -> Matcher:
        """Compiled matcher."""
        return self._matcher

    def canonical_text(self) -> str:
        """Canonical constraint text.

        Compound constraints join their children without parentheses, so the
        text of a grouped constraint such as ``(1.6|1.7),1.8`` reads back as
        ``1.6|(1.7,1.8)``. Use ``untreeify(spec.tree)`` for text that parses
        back to an equal constraint.
        """
        return self._spec

    def match(self, version: str) -> bool:
        """Return True when version text ``version`` satisfies the constraint.

        Raises:
            VersionParseError: when an operator leaf has to parse a malformed
                candidate.
        """
        return self._matcher.test(version)

    test = match

    def merge(self, other: Union[str, "VersionSpec"]) -> "VersionSpec":
        """Return the constraint matching versions accepted by both constraints."""
        other = VersionSpec(other)
        return VersionSpec(join(Combinator.AND, self._tree, other._tree))

    def union(self, other: Union[str, "VersionSpec"]) -> "VersionSpec":
        """Return the constraint matching versions accepted by either constraint."""
        other = VersionSpec(other)
        return VersionSpec(join(Combinator.OR, self._tree, other._tree))

    def __eq__(self, other):
        if isinstance(other, VersionSpec):
            return self._key == other._key
        return NotImplemented

    def __hash__(self):
        return hash(self._key)

    def __str__(self):
        return self._spec

    def __repr__(self):
        return f"{self.__class__.__name__}('{self._spec}')"
