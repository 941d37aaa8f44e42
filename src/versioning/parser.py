"""Token parsing utilities for version constraints and version strings."""

from __future__ import annotations

import re
from typing import List, Tuple, Union

from constants import Constants

from .errors import OperatorError, VersionParseError

# Regex leaves are consumed whole so that grouping characters inside them
# are not treated as combinators.
VSPEC_TOKENS = re.compile(
    r"\s*\^[^$]*[$]"  # regexes
    r"|\s*[()|,]"  # parentheses, logical and, logical or
    r"|[^()|,]+"  # everything else
)

_TREE_GATE_RE = re.compile("[" + re.escape(Constants.GROUPING_CHARS + Constants.REGEX_ANCHORS) + "]")

_VERSION_RELATION_RE = re.compile(r"^(=|==|!=|<=|>=|<|>|~=)(?![=<>!~])(\S+)$")

_VERSION_CHECK_RE = re.compile(r"^[\*\.\+!_0-9a-z]+$")
_VERSION_SPLIT_RE = re.compile(r"([0-9]+|[*]+|[^0-9*]+)")

# 'dev' sorts before any other string; other strings are lower case.
DEV_MARKER = "DEV"
POST_MARKER = float("inf")

Component = List[Union[int, float, str]]


def tokenize_spec(spec_str: str) -> List[str]:
    """Split constraint text into grouping, combinator and leaf tokens.

    Tokens are returned stripped; a regex leaf (``^...$``) is one token.
    """
    return [token.strip() for token in VSPEC_TOKENS.findall(spec_str)]


def needs_tree(spec_str: str) -> bool:
    """Return True when the text carries grouping, combinator or anchor characters."""
    return _TREE_GATE_RE.search(spec_str) is not None


def split_operator(leaf: str) -> Tuple[str, str]:
    """Return (operator token, version text) for an operator leaf.

    The longest operator token wins as long as the next character is not
    itself an operator character, so ``==1.2`` is ``('==', '1.2')`` and
    ``===1.2`` is rejected.
    """
    match = _VERSION_RELATION_RE.match(leaf)
    if match is None:
        raise OperatorError(leaf, "invalid operator")
    return match.group(1), match.group(2)


def _split_components(vstr: str, parts: List[str]) -> List[Component]:
    components: List[Component] = []
    for part in parts:
        if not part:
            raise VersionParseError(vstr, "empty version component")
        runs = _VERSION_SPLIT_RE.findall(part)
        converted: Component = []
        for run in runs:
            if run.isdigit():
                converted.append(int(run))
            elif run == "post":
                converted.append(POST_MARKER)
            elif run == "dev":
                converted.append(DEV_MARKER)
            else:
                converted.append(run)
        # keep numbers and strings in phase: components start with a number
        if not runs[0].isdigit():
            converted.insert(0, 0)
        components.append(converted)
    return components


def tokenize_version(vstr: str) -> Tuple[str, List[Component], List[Component]]:
    """Split version text into (normalized text, release components, local components).

    The release components start with the epoch (``0`` when absent). Each
    component is a list of alternating numeric and alphabetic runs.

    Raises:
        VersionParseError: for empty text, characters outside the version
            alphabet, duplicated ``!``/``+`` separators, a non-integer epoch
            or an empty component.
    """
    version = str(vstr).strip().lower()
    if not version:
        raise VersionParseError(vstr, "empty version string")

    invalid = _VERSION_CHECK_RE.match(version) is None
    if invalid and "-" in version and "_" not in version:
        # dashes are accepted as separators when no underscores are present
        version = version.replace("-", "_")
        invalid = _VERSION_CHECK_RE.match(version) is None
    if invalid:
        raise VersionParseError(vstr, "invalid character(s)")
    normalized = version

    pieces = version.split("!")
    if len(pieces) == 1:
        epoch = "0"
    elif len(pieces) == 2:
        epoch = pieces[0]
        if not epoch.isdigit():
            raise VersionParseError(vstr, "epoch must be an integer")
    else:
        raise VersionParseError(vstr, "duplicated epoch separator '!'")

    pieces = pieces[-1].split("+")
    if len(pieces) == 1:
        local_parts: List[str] = []
    elif len(pieces) == 2:
        local_parts = pieces[1].replace("_", ".").split(".")
    else:
        raise VersionParseError(vstr, "duplicated local version separator '+'")

    release = pieces[0]
    if release.endswith("_"):
        # a trailing underscore stays attached to the last component
        release_parts = release[:-1].replace("_", ".").split(".")
        release_parts[-1] += "_"
    else:
        release_parts = release.replace("_", ".").split(".")

    return (
        normalized,
        _split_components(vstr, [epoch] + release_parts),
        _split_components(vstr, local_parts),
    )
