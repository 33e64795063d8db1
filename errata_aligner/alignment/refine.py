"""
Post-processing passes run after the anchor pass.

Each pass takes the full item list and returns a new one; indices move
between items but never get lost or duplicated, so the totality of the
alignment is preserved by every pass:

1. ``rematch_adjacent_runs``: inside each run of consecutive DELETE/INSERT
   items, pair sentences again, allowing two neighbouring sentences of the
   longer side to merge against one sentence of the other side.
2. ``rematch_non_adjacent``: pair remaining DELETE/INSERT items that lie
   within ``index_range`` of each other.
3. ``merge_deletes_into_matches`` / ``merge_inserts_into_matches``: absorb a
   lone DELETE/INSERT into a neighbouring MATCH when that raises its score
   (sentence split or merged during proofreading).
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from ..core.similarity import SimilarityScorer
from .base import AlignmentItem, AlignmentType


# Runs longer than this only get single-sentence candidates
MERGE_RUN_LIMIT = 3


@dataclass
class _Candidate:
    """A single item or adjacent items of one side of a DELETE/INSERT run"""

    text: str
    members: Tuple[int, ...]  # positions inside the side's item list


def _side_text(item: AlignmentItem, side: str) -> Optional[str]:
    return item.a if side == "a" else item.b


def _candidates(items: Sequence[AlignmentItem], side: str, merge: bool) -> List[_Candidate]:
    candidates = [
        _Candidate(_side_text(item, side), (idx,))
        for idx, item in enumerate(items)
        if _side_text(item, side)
    ]
    if merge and 1 < len(items) <= MERGE_RUN_LIMIT:
        for start in range(len(items) - 1):
            first, second = items[start], items[start + 1]
            if _side_text(first, side) and _side_text(second, side):
                candidates.append(
                    _Candidate(
                        _side_text(first, side) + _side_text(second, side),
                        (start, start + 1),
                    )
                )
    return candidates


def _matched_item(
    deletes: Sequence[AlignmentItem],
    inserts: Sequence[AlignmentItem],
    delete_members: Tuple[int, ...],
    insert_members: Tuple[int, ...],
    score: float,
) -> AlignmentItem:
    return AlignmentItem(
        type=AlignmentType.MATCH,
        a="".join(deletes[i].a for i in delete_members),
        b="".join(inserts[i].b for i in insert_members),
        a_indices=[idx for i in delete_members for idx in deletes[i].a_indices],
        b_indices=[idx for i in insert_members for idx in inserts[i].b_indices],
        similarity=score,
    )


def _rematch_run(
    run: List[AlignmentItem], scorer: SimilarityScorer, threshold: float
) -> List[AlignmentItem]:
    deletes = [item for item in run if item.type == AlignmentType.DELETE]
    inserts = [item for item in run if item.type == AlignmentType.INSERT]
    if not deletes or not inserts:
        return run

    # The shorter side is walked sentence by sentence; the longer side may
    # offer two merged neighbours for one sentence of the shorter side.
    walk_deletes = len(deletes) <= len(inserts)
    short_items, short_side = (deletes, "a") if walk_deletes else (inserts, "b")
    long_items, long_side = (inserts, "b") if walk_deletes else (deletes, "a")
    long_candidates = _candidates(
        long_items, long_side, merge=len(long_items) > len(short_items)
    )

    used_long = set()
    pairs = []  # (delete_members, insert_members, score)
    for short_idx, item in enumerate(short_items):
        text = _side_text(item, short_side)
        if not text:
            continue
        best = None
        best_key = None
        for cand in long_candidates:
            if used_long.intersection(cand.members):
                continue
            if walk_deletes:
                score = scorer.score(text, cand.text)
            else:
                score = scorer.score(cand.text, text)
            if score < threshold:
                continue
            # Highest score, then fewer merged sentences, then earliest
            key = (score, -len(cand.members), -cand.members[0])
            if best_key is None or key > best_key:
                best, best_key = cand, key
        if best is None:
            continue
        used_long.update(best.members)
        if walk_deletes:
            pairs.append(((short_idx,), best.members, best_key[0]))
        else:
            pairs.append((best.members, (short_idx,), best_key[0]))

    if not pairs:
        return run

    match_at = {}  # first delete member -> match item
    matched_deletes = set()
    matched_inserts = set()
    for delete_members, insert_members, score in pairs:
        match_at[delete_members[0]] = _matched_item(
            deletes, inserts, delete_members, insert_members, score
        )
        matched_deletes.update(delete_members)
        matched_inserts.update(insert_members)

    # Rebuild in the original order; a match takes the place of its first delete
    result = []
    delete_counter = insert_counter = 0
    for item in run:
        if item.type == AlignmentType.DELETE:
            if delete_counter in match_at:
                result.append(match_at[delete_counter])
            elif delete_counter not in matched_deletes:
                result.append(item)
            delete_counter += 1
        else:
            if insert_counter not in matched_inserts:
                result.append(item)
            insert_counter += 1
    return result


def rematch_adjacent_runs(
    items: List[AlignmentItem], scorer: SimilarityScorer, threshold: float
) -> List[AlignmentItem]:
    """Re-pair sentences inside each run of consecutive DELETE/INSERT items"""
    result: List[AlignmentItem] = []
    i = 0
    while i < len(items):
        if items[i].type not in (AlignmentType.DELETE, AlignmentType.INSERT):
            result.append(items[i])
            i += 1
            continue
        j = i
        while j < len(items) and items[j].type in (
            AlignmentType.DELETE,
            AlignmentType.INSERT,
        ):
            j += 1
        result.extend(_rematch_run(items[i:j], scorer, threshold))
        i = j
    return result


def rematch_non_adjacent(
    items: List[AlignmentItem],
    scorer: SimilarityScorer,
    threshold: float,
    index_range: int,
) -> List[AlignmentItem]:
    """Pair DELETE and INSERT items that are close but not adjacent.

    A pair qualifies when either the sentence indices or the list positions
    differ by at most ``index_range``.
    """
    deletes = [
        (pos, item)
        for pos, item in enumerate(items)
        if item.type == AlignmentType.DELETE and item.a
    ]
    inserts = [
        (pos, item)
        for pos, item in enumerate(items)
        if item.type == AlignmentType.INSERT and item.b
    ]
    if not deletes or not inserts:
        return items

    deletes.sort(key=lambda pair: pair[1].a_indices[0])
    inserts.sort(key=lambda pair: pair[1].b_indices[0])

    replaced = {}  # delete position -> match item
    consumed = set()  # matched insert positions
    for d_pos, d_item in deletes:
        a_idx = d_item.a_indices[0]
        best_pos, best_key = None, None
        for i_pos, i_item in inserts:
            if i_pos in consumed:
                continue
            b_idx = i_item.b_indices[0]
            if abs(a_idx - b_idx) > index_range and abs(d_pos - i_pos) > index_range:
                continue
            score = scorer.score(d_item.a, i_item.b)
            if score < threshold:
                continue
            key = (score, -abs(a_idx - b_idx))
            if best_key is None or key > best_key:
                best_pos, best_key = i_pos, key
        if best_pos is None:
            continue
        consumed.add(best_pos)
        i_item = items[best_pos]
        replaced[d_pos] = AlignmentItem(
            type=AlignmentType.MATCH,
            a=d_item.a,
            b=i_item.b,
            a_indices=list(d_item.a_indices),
            b_indices=list(i_item.b_indices),
            similarity=best_key[0],
        )

    if not replaced:
        return items
    return [
        replaced.get(pos, item)
        for pos, item in enumerate(items)
        if pos not in consumed
    ]


def _is_mergeable_match(item: Optional[AlignmentItem]) -> bool:
    return (
        item is not None
        and item.type == AlignmentType.MATCH
        and bool(item.a)
        and bool(item.b)
    )


def merge_deletes_into_matches(
    items: List[AlignmentItem], scorer: SimilarityScorer
) -> List[AlignmentItem]:
    """Absorb a DELETE into the neighbouring MATCH whose score it raises most"""
    pending = list(items)
    result: List[AlignmentItem] = []
    for i, current in enumerate(pending):
        if current.type != AlignmentType.DELETE or not current.a:
            result.append(current)
            continue

        prev_item = result[-1] if result else None
        next_item = pending[i + 1] if i + 1 < len(pending) else None
        best_score, direction = 0.0, None

        if _is_mergeable_match(prev_item):
            score = scorer.score(prev_item.a + current.a, prev_item.b)
            if score > (prev_item.similarity or 0.0) and score > best_score:
                best_score, direction = score, "prev"
        if _is_mergeable_match(next_item):
            score = scorer.score(current.a + next_item.a, next_item.b)
            if score > (next_item.similarity or 0.0) and score > best_score:
                best_score, direction = score, "next"

        if direction == "prev":
            result[-1] = replace(
                prev_item,
                a=prev_item.a + current.a,
                a_indices=prev_item.a_indices + current.a_indices,
                similarity=best_score,
            )
        elif direction == "next":
            pending[i + 1] = replace(
                next_item,
                a=current.a + next_item.a,
                a_indices=current.a_indices + next_item.a_indices,
                similarity=best_score,
            )
        else:
            result.append(current)
    return result


def merge_inserts_into_matches(
    items: List[AlignmentItem], scorer: SimilarityScorer
) -> List[AlignmentItem]:
    """Absorb an INSERT into a neighbouring MATCH (mirror of the delete pass).

    Besides a score gain, an insert is also absorbed when its normalized
    text is the tail of the previous match's original side, or the head of
    the next match's original side: the revision split that sentence.
    """
    pending = list(items)
    result: List[AlignmentItem] = []
    for i, current in enumerate(pending):
        if current.type != AlignmentType.INSERT or not current.b:
            result.append(current)
            continue

        prev_item = result[-1] if result else None
        next_item = pending[i + 1] if i + 1 < len(pending) else None
        norm_insert = scorer.normalize(current.b)
        best_score, direction = 0.0, None

        if _is_mergeable_match(prev_item):
            score = scorer.score(prev_item.a, prev_item.b + current.b)
            prev_sim = prev_item.similarity or 0.0
            is_tail = bool(norm_insert) and scorer.normalize(prev_item.a).endswith(
                norm_insert
            )
            if score > prev_sim or is_tail:
                score = max(score, prev_sim)
                if is_tail or score > best_score:
                    best_score, direction = score, "prev"
        if _is_mergeable_match(next_item):
            score = scorer.score(next_item.a, current.b + next_item.b)
            next_sim = next_item.similarity or 0.0
            is_head = bool(norm_insert) and scorer.normalize(next_item.a).startswith(
                norm_insert
            )
            if score > next_sim or is_head:
                score = max(score, next_sim)
                if is_head or score > best_score:
                    best_score, direction = score, "next"

        if direction == "prev":
            result[-1] = replace(
                prev_item,
                b=prev_item.b + current.b,
                b_indices=prev_item.b_indices + current.b_indices,
                similarity=best_score,
            )
        elif direction == "next":
            pending[i + 1] = replace(
                next_item,
                b=current.b + next_item.b,
                b_indices=current.b_indices + next_item.b_indices,
                similarity=best_score,
            )
        else:
            result.append(current)
    return result
