"""
Position and line-number display for alignment items.

``LocationRange`` renders the original/revised side of an item compactly
(``a@{12-14}[30-32]``: lines 12 to 14, sentence indices 30 to 32) for logs
and item reprs.
"""

from typing import Tuple, Optional, List, Union, Sequence
from dataclasses import dataclass


def _compact(values: Sequence[int]) -> str:
    if len(values) == 1:
        return f"{values[0]}"
    # Non-consecutive lists are collapsed into a min-max range
    return f"{min(values)}-{max(values)}"


@dataclass
class LocationRange:
    """
    Location of one side of an alignment item: original (A) or revised (B).
    """

    is_original: bool
    line_numbers: Tuple[int, ...]
    sentence_indices: Optional[Tuple[int, ...]] = None

    def __str__(self) -> str:
        prefix = "a" if self.is_original else "b"
        line_part = _compact(self.line_numbers) if self.line_numbers else ""
        if self.sentence_indices:
            return f"{prefix}@{{{line_part}}}[{_compact(self.sentence_indices)}]"
        return f"{prefix}@{{{line_part}}}"

    @staticmethod
    def from_item_side(
        is_original: bool,
        line_numbers: Union[Sequence[Optional[int]], int, None],
        sentence_indices: Optional[Sequence[int]] = None,
    ) -> "LocationRange":
        if line_numbers is None:
            line_numbers = ()
        elif isinstance(line_numbers, int):
            line_numbers = (line_numbers,)
        lines: List[int] = [n for n in line_numbers if n is not None]
        return LocationRange(
            is_original=is_original,
            line_numbers=tuple(lines),
            sentence_indices=tuple(sentence_indices) if sentence_indices else None,
        )
