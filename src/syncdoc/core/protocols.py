"""Interface contracts for the pluggable parts of the merge engine.

The formatter is the only external process the engine talks to; relevance
predicates decide which hunks a merge direction applies.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from syncdoc.diff.hunk import Hunk
    from syncdoc.diff.lines import DocMarkers


@runtime_checkable
class Formatter(Protocol):
    """Deterministic source formatter: same input, same output."""

    def format(self, text: str) -> str: ...


class RelevancePredicate(Protocol):
    """Decide whether a hunk carries a change the merge direction applies."""

    def __call__(
        self,
        hunk: Hunk,
        before_lines: Sequence[str],
        after_lines: Sequence[str],
        markers: DocMarkers,
        /,
    ) -> bool: ...
