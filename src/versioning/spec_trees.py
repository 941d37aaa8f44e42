"""Expression trees for compound version constraints.

``,`` is AND and ``|`` is OR; AND binds tighter than OR and parentheses
group. Nested groups using the same combinator as their parent are fused, so
``(1.6|1.7)|1.8`` and ``1.6|1.7|1.8`` produce the same tree.

    >>> treeify("1.2.3,4.5.6|<=7.8.9")
    ConstraintTree(combinator=<Combinator.OR: '|'>, parts=(ConstraintTree(combinator=<Combinator.AND: ','>, parts=('1.2.3', '4.5.6')), '<=7.8.9'))
    >>> untreeify(treeify("(1.2.3|4.5.6),<=7.8.9"))
    '(1.2.3|4.5.6),<=7.8.9'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from .errors import SpecSyntaxError
from .parser import tokenize_spec


class Combinator(Enum):
    """Logical combinators between sibling constraint parts."""

    AND = ","
    OR = "|"


@dataclass(frozen=True)
class ConstraintTree:
    """A combinator applied to an ordered sequence of leaves and subtrees."""

    combinator: Combinator
    parts: Tuple["Node", ...]

    def leaves(self) -> List[str]:
        """Return every leaf token in left-to-right order."""
        out: List[str] = []
        for part in self.parts:
            if isinstance(part, ConstraintTree):
                out.extend(part.leaves())
            else:
                out.append(part)
        return out


Node = Union[str, ConstraintTree]


def _operands(node: Node, combinator: Combinator) -> Tuple[Node, ...]:
    if isinstance(node, ConstraintTree) and node.combinator is combinator:
        return node.parts
    return (node,)


def join(combinator: Combinator, left: Node, right: Node) -> ConstraintTree:
    """Combine two nodes, fusing operands that already use ``combinator``."""
    return ConstraintTree(combinator, _operands(left, combinator) + _operands(right, combinator))


def treeify(spec_str: str) -> Node:
    """Parse constraint text into a leaf string or a ConstraintTree.

    Raises:
        SpecSyntaxError: on unbalanced parentheses, a combinator with an
            empty operand, adjacent groups without a combinator, or an
            empty expression.
    """
    tokens = tokenize_spec(f"({spec_str})")
    output: List[Node] = []
    stack: List[str] = []

    def apply_ops(cstop: str) -> None:
        # cstop: operators with lower precedence
        while stack and stack[-1] not in cstop:
            if len(output) < 2:
                raise SpecSyntaxError(spec_str, "cannot join single expression")
            combinator = Combinator(stack.pop())
            right = output.pop()
            left = output.pop()
            output.append(join(combinator, left, right))

    depth_outputs: List[int] = []
    for item in tokens:
        if item == "|":
            apply_ops("(")
            stack.append("|")
        elif item == ",":
            apply_ops("|(")
            stack.append(",")
        elif item == "(":
            stack.append("(")
            depth_outputs.append(len(output))
        elif item == ")":
            apply_ops("(")
            if not stack or stack[-1] != "(":
                raise SpecSyntaxError(spec_str, "unbalanced ')'")
            stack.pop()
            opened_at = depth_outputs.pop()
            if len(output) != opened_at + 1:
                reason = "empty group" if len(output) == opened_at else "missing combinator between expressions"
                raise SpecSyntaxError(spec_str, reason)
        elif not item:
            raise SpecSyntaxError(spec_str, "empty expression")
        else:
            output.append(item)
    if stack:
        raise SpecSyntaxError(spec_str, "unbalanced '('")
    if len(output) != 1:
        raise SpecSyntaxError(spec_str, "unable to determine version from spec")
    return output[0]


def untreeify(node: Node, _parent: Union[Combinator, None] = None) -> str:
    """Serialize a tree back to constraint text.

    Parentheses are only written where precedence requires them, i.e. around
    an OR group inside an AND group.
    """
    if not isinstance(node, ConstraintTree):
        return node
    text = node.combinator.value.join(untreeify(part, node.combinator) for part in node.parts)
    if _parent is Combinator.AND and node.combinator is Combinator.OR:
        text = f"({text})"
    return text
