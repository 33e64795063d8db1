"""Base aligner interface

Defines the alignment item data structure and the unified interface of the
sentence aligners.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging

from ..position import LocationRange


class AlignmentType(Enum):
    """Tag of an alignment item"""

    MATCH = "match"
    DELETE = "delete"  # only in the original
    INSERT = "insert"  # only in the revision
    MOVEOUT = "moveout"  # original position of a relocated sentence
    MOVEIN = "movein"  # revised position of a relocated sentence


class AlignmentCancelled(Exception):
    """Raised when a cooperative cancellation check fires.

    ``partial`` holds the results produced before the check, which still
    cover every processed index exactly once.
    """

    def __init__(self, partial: List[Any]):
        self.partial = partial
        super().__init__(f"Alignment cancelled after {len(partial)} items")


@dataclass
class AlignmentItem:
    """One entry of the errata alignment.

    MATCH carries both sides (possibly merged from several sentences), DELETE
    only the original side, INSERT only the revised side. A relocated
    sentence is split into a MOVEOUT (original side) and a MOVEIN (revised
    side) sharing ``move_id``.
    """

    type: AlignmentType
    a: Optional[str] = None
    b: Optional[str] = None
    a_indices: List[int] = field(default_factory=list)
    b_indices: List[int] = field(default_factory=list)
    similarity: Optional[float] = None
    a_line_numbers: List[Optional[int]] = field(default_factory=list)
    b_line_numbers: List[Optional[int]] = field(default_factory=list)
    move_id: Optional[int] = None

    @property
    def a_line_number(self) -> Optional[int]:
        return self.a_line_numbers[0] if self.a_line_numbers else None

    @property
    def b_line_number(self) -> Optional[int]:
        return self.b_line_numbers[0] if self.b_line_numbers else None

    @property
    def a_location(self) -> LocationRange:
        return LocationRange.from_item_side(True, self.a_line_numbers, self.a_indices)

    @property
    def b_location(self) -> LocationRange:
        return LocationRange.from_item_side(False, self.b_line_numbers, self.b_indices)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        if self.a_indices:
            data.update(
                a=self.a,
                a_indices=list(self.a_indices),
                a_line_number=self.a_line_number,
                a_line_numbers=list(self.a_line_numbers),
            )
        if self.b_indices:
            data.update(
                b=self.b,
                b_indices=list(self.b_indices),
                b_line_number=self.b_line_number,
                b_line_numbers=list(self.b_line_numbers),
            )
        if self.similarity is not None:
            data["similarity"] = round(self.similarity, 6)
        if self.move_id is not None:
            data["move_id"] = self.move_id
        return data

    def __repr__(self):
        parts = [self.type.value]
        if self.a_indices:
            parts.append(str(self.a_location))
        if self.b_indices:
            parts.append(str(self.b_location))
        if self.similarity is not None:
            parts.append(f"sim={self.similarity:.3f}")
        return f"AlignmentItem({', '.join(parts)})"


CancelCheck = Callable[[], bool]


class AlignerBase(ABC):
    """Aligner base class

    All sentence alignment algorithms inherit from this class and implement
    the align() method.

    Responsibilities:
    - Define unified alignment interface
    - Provide the cooperative cancellation hook
    - Handle logging
    """

    def __init__(self, should_cancel: Optional[CancelCheck] = None):
        self.should_cancel = should_cancel
        self.logger = logging.getLogger(self.__class__.__module__)

    def check_cancelled(self, partial: List[AlignmentItem]):
        """Raise AlignmentCancelled with a snapshot of partial results"""
        if self.should_cancel is not None and self.should_cancel():
            raise AlignmentCancelled(list(partial))

    @abstractmethod
    def align(self, sentences_a, sentences_b) -> List[AlignmentItem]:
        """Perform alignment

        Args:
            sentences_a: Original sentence sequence
            sentences_b: Revised sentence sequence

        Returns:
            List of alignment items covering every index of both inputs
        """
        raise NotImplementedError
