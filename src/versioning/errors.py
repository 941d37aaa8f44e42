"""Exceptions raised while parsing versions and version constraints."""

from __future__ import annotations


class InvalidVersionSpec(ValueError):
    """Base error for any constraint or version text that cannot be parsed.

    Attributes:
        spec: The offending text.
        reason: Human readable explanation.
    """

    def __init__(self, spec: str, reason: str):
        self.spec = spec
        self.reason = reason
        super().__init__(f"Invalid version '{spec}': {reason}")


class SpecSyntaxError(InvalidVersionSpec):
    """Unbalanced parentheses or a combinator with an empty operand."""


class OperatorError(InvalidVersionSpec):
    """Unrecognized operator, operator misuse, or a malformed regex leaf."""


class VersionParseError(InvalidVersionSpec):
    """Version text that cannot be split into release/local segments."""


class RegexCompileError(InvalidVersionSpec):
    """A regex leaf, or a translated wildcard pattern, that fails to compile."""
