"""Version ordering model.

A version is split into an epoch, release components and an optional local
identifier (after ``+``). Every component is a list of alternating numeric
and alphabetic runs, so ``1.2013a`` becomes ``[[0], [1], [2013, 'a']]``.

Ordering rules:

* numeric runs compare numerically, alphabetic runs lexicographically;
* at the same position an alphabetic run sorts before a numeric one
  (``1.0a1 < 1.0``), ``dev`` before any other string and ``post`` after any
  number;
* missing trailing components and runs count as zero, so ``1.7 == 1.7.0``;
* local identifiers are compared only after the release components tie.
"""

from __future__ import annotations

from functools import total_ordering
from itertools import zip_longest
from typing import List, Optional, Sequence, Tuple

from .parser import Component, tokenize_version


def _compare_components(t1: Sequence[Component], t2: Sequence[Component]) -> int:
    for v1, v2 in zip_longest(t1, t2, fillvalue=[]):
        for c1, c2 in zip_longest(v1, v2, fillvalue=0):
            if c1 == c2:
                continue
            if isinstance(c1, str):
                if not isinstance(c2, str):
                    return -1
            elif isinstance(c2, str):
                return 1
            return -1 if c1 < c2 else 1
    return 0


def _components_equal(t1: Sequence[Component], t2: Sequence[Component]) -> bool:
    return _compare_components(t1, t2) == 0


def _strip_zeros(components: Sequence[Component]) -> Tuple[Tuple, ...]:
    stripped = []
    for component in components:
        runs = list(component)
        while runs and runs[-1] == 0:
            runs.pop()
        stripped.append(tuple(runs))
    while stripped and not stripped[-1]:
        stripped.pop()
    return tuple(stripped)


@total_ordering
class VersionOrder:
    """Comparable, immutable view of a version string.

    Args:
        vstr: Version text, e.g. ``1.7.0``, ``1!2.0``, ``1.2.3+4.5.6``.

    Raises:
        VersionParseError: when the text cannot be tokenized.
    """

    __slots__ = ("norm_version", "version", "local", "_hash")

    def __init__(self, vstr: str):
        normalized, version, local = tokenize_version(vstr)
        self.norm_version: str = normalized
        self.version: List[Component] = version
        self.local: List[Component] = local
        self._hash: Optional[int] = None

    @property
    def epoch(self) -> int:
        """Integer epoch (0 when the text has none)."""
        return int(self.version[0][0])

    @property
    def release(self) -> List[Component]:
        """Release components without the epoch."""
        return self.version[1:]

    def compare(self, other: "VersionOrder") -> int:
        """Return -1, 0 or 1 as self sorts before, equal to, or after ``other``."""
        result = _compare_components(self.version, other.version)
        if result:
            return result
        return _compare_components(self.local, other.local)

    def startswith(self, other: "VersionOrder") -> bool:
        """Test whether self begins with the components of ``other``.

        When ``other`` declares a local identifier, the release parts must be
        equal and the prefix test applies to the local identifier instead. A
        missing final component is read as zero, but a differing one never
        matches: ``1.0`` starts with ``1.0.0`` and ``1.0.1`` does not.
        """
        if other.local:
            if not _components_equal(self.version, other.version):
                return False
            t1, t2 = self.local, other.local
        else:
            t1, t2 = self.version, other.version
        nt = len(t2) - 1
        if not _components_equal(t1[:nt], t2[:nt]):
            return False
        v1 = t1[nt] if len(t1) > nt else []
        v2 = t2[nt]
        nr = len(v2) - 1
        if not _components_equal([v1[:nr]], [v2[:nr]]):
            return False
        c2 = v2[nr]
        if isinstance(c2, str):
            c1 = v1[nr] if len(v1) > nr else None
            return isinstance(c1, str) and c1.startswith(c2)
        c1 = v1[nr] if len(v1) > nr else 0
        return c1 == c2

    def __eq__(self, other):
        if not isinstance(other, VersionOrder):
            return NotImplemented
        return _components_equal(self.version, other.version) and _components_equal(
            self.local, other.local
        )

    def __lt__(self, other):
        if not isinstance(other, VersionOrder):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self):
        if self._hash is None:
            self._hash = hash((_strip_zeros(self.version), _strip_zeros(self.local)))
        return self._hash

    def __str__(self):
        return self.norm_version

    def __repr__(self):
        return f'{self.__class__.__name__}("{self.norm_version}")'


def normalized_version(version: str) -> VersionOrder:
    """Parse version text into a VersionOrder."""
    return VersionOrder(version)


def ver_eval(vtest: str, spec: str) -> bool:
    """Evaluate constraint text ``spec`` against version text ``vtest``."""
    from .matching import VersionSpec  # pylint: disable=import-outside-toplevel

    return VersionSpec(spec).match(vtest)
