"""Tally of an alignment result by item type."""

from dataclasses import dataclass, asdict
from typing import Dict, Iterable

from .base import AlignmentItem, AlignmentType


@dataclass
class AlignmentStatistics:
    total: int = 0
    match: int = 0
    delete: int = 0
    insert: int = 0
    moveout: int = 0
    movein: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def alignment_statistics(items: Iterable[AlignmentItem]) -> AlignmentStatistics:
    """Count items per type; ``total`` is the number of items"""
    stats = AlignmentStatistics()
    for item in items:
        stats.total += 1
        if item.type == AlignmentType.MATCH:
            stats.match += 1
        elif item.type == AlignmentType.DELETE:
            stats.delete += 1
        elif item.type == AlignmentType.INSERT:
            stats.insert += 1
        elif item.type == AlignmentType.MOVEOUT:
            stats.moveout += 1
        elif item.type == AlignmentType.MOVEIN:
            stats.movein += 1
    return stats
