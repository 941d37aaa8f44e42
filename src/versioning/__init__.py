"""Version constraint matching for package resolution."""

from .cache import InternRegistry, get_registry, session_registry
from .comp_op import CompOp
from .errors import (
    InvalidVersionSpec,
    OperatorError,
    RegexCompileError,
    SpecSyntaxError,
    VersionParseError,
)
from .matching import (
    AllOf,
    AlwaysTrue,
    AnyOf,
    ExactText,
    Matcher,
    NeverTrue,
    OperatorMatch,
    RegexMatch,
    VersionSpec,
    classify,
)
from .spec_trees import Combinator, ConstraintTree, treeify, untreeify
from .version import VersionOrder, normalized_version, ver_eval

__all__ = [
    "AllOf",
    "AlwaysTrue",
    "AnyOf",
    "Combinator",
    "CompOp",
    "ConstraintTree",
    "ExactText",
    "InternRegistry",
    "InvalidVersionSpec",
    "Matcher",
    "NeverTrue",
    "OperatorError",
    "OperatorMatch",
    "RegexCompileError",
    "RegexMatch",
    "SpecSyntaxError",
    "VersionOrder",
    "VersionParseError",
    "VersionSpec",
    "classify",
    "get_registry",
    "normalized_version",
    "session_registry",
    "treeify",
    "untreeify",
    "ver_eval",
]
