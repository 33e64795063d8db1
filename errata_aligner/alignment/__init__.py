"""Sentence alignment module

Anchor/window aligner for original/revised texts plus its refinement passes.
"""

from .base import AlignerBase, AlignmentCancelled, AlignmentItem, AlignmentType
from .anchor_aligner import AnchorAligner, align_sentences
from .statistics import AlignmentStatistics, alignment_statistics

__all__ = [
    "AlignerBase",
    "AlignmentCancelled",
    "AlignmentItem",
    "AlignmentType",
    "AnchorAligner",
    "align_sentences",
    "AlignmentStatistics",
    "alignment_statistics",
]
