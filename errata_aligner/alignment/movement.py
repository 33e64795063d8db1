"""
Relocated sentence detection.

MATCH items are grouped, in list order, into blocks whose revised indices
are contiguous. A block that can be spliced next to (or between) other
blocks to form a longer contiguous run on the revised side was moved by the
proofreader: each of its matches becomes a MOVEOUT at its original position
and a MOVEIN at the splice position. The smallest blocks are moved first.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple
import logging

from .base import AlignmentItem, AlignmentType


logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100


@dataclass
class _Block:
    """Run of MATCH items with contiguous revised indices"""

    positions: List[int]  # positions in the item list
    b_start: int
    b_end: int  # inclusive

    @property
    def size(self) -> int:
        return len(self.positions)


def _build_blocks(items: List[AlignmentItem], moved: Set[int]) -> List[_Block]:
    blocks: List[_Block] = []
    current: Optional[_Block] = None
    for pos, item in enumerate(items):
        if item.type != AlignmentType.MATCH or not item.b_indices or pos in moved:
            continue
        b_start, b_end = min(item.b_indices), max(item.b_indices)
        if current is not None and b_start == current.b_end + 1:
            current.positions.append(pos)
            current.b_end = b_end
            continue
        current = _Block([pos], b_start, b_end)
        blocks.append(current)
    return blocks


def _splice_position(block: _Block, blocks: List[_Block]) -> Tuple[Optional[int], int]:
    """Where ``block`` should go to join its revised-side neighbours.

    Returns (insert position, size of the resulting contiguous run); the
    position is None when the block has no neighbour to join.
    """
    prev_block = next_block = None
    for other in blocks:
        if other is block:
            continue
        if other.b_end + 1 == block.b_start:
            prev_block = other
        elif block.b_end + 1 == other.b_start:
            next_block = other

    if prev_block is not None and next_block is not None:
        return next_block.positions[0], prev_block.size + block.size + next_block.size
    if next_block is not None:
        return next_block.positions[0], block.size + next_block.size
    if prev_block is not None:
        return prev_block.positions[-1] + 1, prev_block.size + block.size
    return None, 0


def detect_movements(items: List[AlignmentItem]) -> List[AlignmentItem]:
    """Turn relocated MATCH items into MOVEOUT/MOVEIN pairs.

    In-order alignments are returned unchanged: blocks listed in increasing
    revised order are never adjacent, so nothing can be spliced.
    """
    moved: Set[int] = set()
    insert_at: Dict[int, int] = {}  # moved item position -> splice position

    for _ in range(MAX_ITERATIONS):
        blocks = _build_blocks(items, moved)
        if len(blocks) <= 1:
            break

        smallest = min(block.size for block in blocks)
        best_block, best_pos, best_size = None, None, 0
        for block in blocks:
            if block.size != smallest:
                continue
            pos, merged_size = _splice_position(block, blocks)
            if pos is not None and merged_size > best_size:
                best_block, best_pos, best_size = block, pos, merged_size

        if best_block is None:
            break
        logger.debug(
            f"Moving block b[{best_block.b_start}-{best_block.b_end}] "
            f"({best_block.size} items) to position {best_pos}"
        )
        for pos in best_block.positions:
            moved.add(pos)
            insert_at[pos] = best_pos

    if not moved:
        return items

    move_ids = {pos: move_id for move_id, pos in enumerate(sorted(moved), start=1)}
    moveins: Dict[int, List[AlignmentItem]] = {}
    result: List[AlignmentItem] = []

    for pos in sorted(moved, key=lambda p: (insert_at[p], min(items[p].b_indices))):
        item = items[pos]
        moveins.setdefault(insert_at[pos], []).append(
            AlignmentItem(
                type=AlignmentType.MOVEIN,
                b=item.b,
                b_indices=list(item.b_indices),
                similarity=item.similarity,
                move_id=move_ids[pos],
            )
        )

    for pos, item in enumerate(items):
        result.extend(moveins.get(pos, []))
        if pos in moved:
            result.append(
                AlignmentItem(
                    type=AlignmentType.MOVEOUT,
                    a=item.a,
                    a_indices=list(item.a_indices),
                    similarity=item.similarity,
                    move_id=move_ids[pos],
                )
            )
        else:
            result.append(item)
    result.extend(moveins.get(len(items), []))

    logger.debug(f"Detected {len(moved)} moved sentence(s)")
    return result
