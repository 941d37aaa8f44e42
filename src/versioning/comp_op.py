"""Comparison operators applied between a candidate version and a bound."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .errors import OperatorError
from .version import VersionOrder


class CompOp(Enum):
    """Operators recognized in constraint leaves.

    The values are the textual tokens; ``!=startswith`` and ``=startswith``
    are internal forms produced from ``!=X.*`` and ``X*`` leaves.
    """

    STRICT_EQUAL = "=="
    COMPATIBLE_EQUAL = "="
    NOT_EQUAL = "!="
    NOT_EQUAL_STARTS_WITH = "!=startswith"
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="
    COMPATIBLE_RELEASE = "~="
    STARTS_WITH = "=startswith"

    @classmethod
    def from_token(cls, token: str) -> "CompOp":
        """Return the operator for ``token``.

        Raises:
            OperatorError: when the token is not recognized.
        """
        try:
            return cls(token)
        except ValueError as exc:
            raise OperatorError(token, "unrecognized operator") from exc

    @property
    def sign(self) -> str:
        """Token used when the operator is written back out."""
        if self is CompOp.NOT_EQUAL_STARTS_WITH:
            return "!="
        if self is CompOp.STARTS_WITH:
            return "="
        return self.value

    def evaluate(
        self,
        candidate: VersionOrder,
        bound: VersionOrder,
        prefix: Optional[VersionOrder] = None,
    ) -> bool:
        """Apply the operator as ``candidate <op> bound``.

        Args:
            candidate: Version being tested.
            bound: Version written in the constraint.
            prefix: For COMPATIBLE_RELEASE only, ``bound`` with its last
                release component dropped.

        Returns:
            True when the candidate satisfies the operator.
        """
        if self is CompOp.STRICT_EQUAL:
            return candidate == bound
        if self is CompOp.NOT_EQUAL:
            return candidate != bound
        if self is CompOp.LESS:
            return candidate < bound
        if self is CompOp.LESS_EQUAL:
            return candidate <= bound
        if self is CompOp.GREATER:
            return candidate > bound
        if self is CompOp.GREATER_EQUAL:
            return candidate >= bound
        if self in (CompOp.COMPATIBLE_EQUAL, CompOp.STARTS_WITH):
            return candidate.startswith(bound)
        if self is CompOp.NOT_EQUAL_STARTS_WITH:
            return not candidate.startswith(bound)
        if self is CompOp.COMPATIBLE_RELEASE:
            if prefix is None:
                raise OperatorError(str(bound), "compatible release requires a prefix")
            return candidate >= bound and candidate.startswith(prefix)
        raise OperatorError(self.value, "unhandled operator")


def compatible_release_prefix(bound: VersionOrder) -> VersionOrder:
    """Return ``bound`` truncated to all but its last release component.

    The epoch is kept and any local identifier is dropped, so ``~=1!2.3``
    uses the prefix ``1!2``.

    Raises:
        OperatorError: when ``bound`` has fewer than two release components.
    """
    release = bound.norm_version.split("+", 1)[0]
    epoch, sep, rest = release.rpartition("!")
    parts = rest.replace("_", ".").split(".")
    if len(parts) < 2:
        raise OperatorError(f"~={bound}", "compatible release needs at least two release components")
    return VersionOrder(f"{epoch}{sep}{'.'.join(parts[:-1])}")
