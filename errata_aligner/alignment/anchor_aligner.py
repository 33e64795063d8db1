"""
Anchor/window sentence aligner for proofreading errata.

The original text (A) is walked in order while an anchor (the index after the
last matched revised sentence) tracks the expected position in the revised
text (B). Each original sentence looks for its best
unused counterpart inside a window around the anchor; the window grows when
nothing clears the threshold, so sentences moved a few paragraphs away are
still found. What remains unmatched is then re-paired, merged and checked for
relocation by the passes in ``refine`` and ``movement``.

Phases:
1. Anchor pass: MATCH or DELETE for every original sentence
2. Insert placement: unused revised sentences become INSERT items
3. Adjacent rematch inside DELETE/INSERT runs (many-to-one merges)
4. Non-adjacent rematch of the remaining DELETE/INSERT items
5. Merge lone DELETE/INSERT items into neighbouring matches
6. Move detection (MOVEOUT/MOVEIN)
7. Line numbers attached from the inputs
"""

from typing import Iterable, List, Optional, Set, Tuple

from ..config import AlignmentOptions
from ..core.similarity import SimilarityScorer
from ..core.splitter import Sentence, SentenceLike, as_sentences
from ..core.tokenizer import Tokenizer
from .base import AlignerBase, AlignmentItem, AlignmentType, CancelCheck
from .movement import detect_movements
from .refine import (
    merge_deletes_into_matches,
    merge_inserts_into_matches,
    rematch_adjacent_runs,
    rematch_non_adjacent,
)
from .statistics import alignment_statistics


class AnchorAligner(AlignerBase):
    """Sentence aligner driven by a moving anchor into the revised text"""

    # A failed search whose best score exceeds this still moves the anchor
    NEAR_MISS_SIMILARITY = 0.3

    def __init__(
        self,
        options: Optional[AlignmentOptions] = None,
        tokenizer: Optional[Tokenizer] = None,
        scorer: Optional[SimilarityScorer] = None,
        should_cancel: Optional[CancelCheck] = None,
    ):
        super().__init__(should_cancel)
        self.options = (options or AlignmentOptions()).validate()
        self.scorer = scorer or SimilarityScorer(self.options, tokenizer)

    def align(
        self,
        sentences_a: Iterable[SentenceLike],
        sentences_b: Iterable[SentenceLike],
    ) -> List[AlignmentItem]:
        seq_a = as_sentences(sentences_a)
        seq_b = as_sentences(sentences_b)
        texts_a = [s.text for s in seq_a]
        texts_b = [s.text for s in seq_b]
        self.logger.debug(
            f"Aligning {len(texts_a)} original / {len(texts_b)} revised sentences"
        )

        if not texts_a and not texts_b:
            return []

        opts = self.options
        threshold = opts.similarity_threshold

        items, used_b = self._anchor_pass(texts_a, texts_b)
        items = self._place_inserts(items, texts_b, used_b)
        self.logger.debug(f"Anchor pass: {alignment_statistics(items).to_dict()}")

        items = rematch_adjacent_runs(items, self.scorer, threshold)
        items = rematch_non_adjacent(items, self.scorer, threshold, opts.window_size)
        items = merge_deletes_into_matches(items, self.scorer)
        items = merge_inserts_into_matches(items, self.scorer)
        items = detect_movements(items)

        self._attach_line_numbers(items, seq_a, seq_b)

        stats = alignment_statistics(items)
        self.logger.info(
            f"Aligned {len(texts_a)}/{len(texts_b)} sentences: "
            f"{stats.match} match, {stats.delete} delete, {stats.insert} insert, "
            f"{stats.moveout} moved"
        )
        return items

    # ------------------------------------------------------------------
    # Phase 1: anchor pass
    # ------------------------------------------------------------------

    def _start_level(self, consecutive_deletes: int) -> int:
        """Initial expansion level after a streak of unmatched sentences"""
        opts = self.options
        if consecutive_deletes < opts.consecutive_fail_threshold:
            return 0
        factor = 1 + (consecutive_deletes - opts.consecutive_fail_threshold) // 2
        return min(opts.max_window_expansion, factor)

    def _scan_window(
        self,
        text_a: str,
        texts_b: List[str],
        anchor: int,
        radius: int,
        used_b: Set[int],
    ) -> Tuple[Optional[int], float, Optional[int], float]:
        """Best candidate and best near miss inside one window.

        Returns (match index, match score, near-miss index, near-miss score).
        """
        start = max(0, anchor - radius)
        end = min(len(texts_b), anchor + radius + self.options.offset)
        best_idx, best_key = None, None
        near_idx, near_key = None, None

        for b_idx in range(start, end):
            if b_idx in used_b:
                continue
            score = self.scorer.score(text_a, texts_b[b_idx])
            # Highest score, then nearest to the anchor, then lower index
            key = (score, -abs(b_idx - anchor), -b_idx)
            if near_key is None or key > near_key:
                near_idx, near_key = b_idx, key
            if score >= self.options.similarity_threshold:
                if best_key is None or key > best_key:
                    best_idx, best_key = b_idx, key

        return (
            best_idx,
            best_key[0] if best_key else 0.0,
            near_idx,
            near_key[0] if near_key else 0.0,
        )

    def _search(
        self,
        text_a: str,
        texts_b: List[str],
        anchor: int,
        used_b: Set[int],
        start_level: int,
    ) -> Tuple[Optional[int], float, Optional[int], float]:
        """Search with a growing window until a match or the fail limit"""
        opts = self.options
        level = start_level
        fails = 0
        near_idx, near_score = None, 0.0
        while True:
            radius = opts.window_size * (1 + level)
            best_idx, best_score, idx, score = self._scan_window(
                text_a, texts_b, anchor, radius, used_b
            )
            if idx is not None and score > near_score:
                near_idx, near_score = idx, score
            if best_idx is not None:
                if level > start_level:
                    self.logger.debug(
                        f"Found b[{best_idx}] after expanding the window to radius {radius}"
                    )
                return best_idx, best_score, near_idx, near_score
            fails += 1
            if fails >= opts.consecutive_fail_threshold or level >= opts.max_window_expansion:
                return None, 0.0, near_idx, near_score
            level += 1

    def _anchor_pass(
        self, texts_a: List[str], texts_b: List[str]
    ) -> Tuple[List[AlignmentItem], Set[int]]:
        items: List[AlignmentItem] = []
        used_b: Set[int] = set()
        anchor = 0
        consecutive_deletes = 0

        for a_idx, text_a in enumerate(texts_a):
            self.check_cancelled(items)

            best_idx, best_score, near_idx, near_score = self._search(
                text_a, texts_b, anchor, used_b, self._start_level(consecutive_deletes)
            )
            if best_idx is not None:
                items.append(
                    AlignmentItem(
                        type=AlignmentType.MATCH,
                        a=text_a,
                        b=texts_b[best_idx],
                        a_indices=[a_idx],
                        b_indices=[best_idx],
                        similarity=best_score,
                    )
                )
                used_b.add(best_idx)
                # offset widens the forward reach of the window, never the anchor
                anchor = best_idx + 1
                consecutive_deletes = 0
            else:
                items.append(
                    AlignmentItem(type=AlignmentType.DELETE, a=text_a, a_indices=[a_idx])
                )
                consecutive_deletes += 1
                if near_idx is not None and near_score > self.NEAR_MISS_SIMILARITY:
                    anchor = max(anchor, near_idx)

        return items, used_b

    # ------------------------------------------------------------------
    # Phase 2: insert placement
    # ------------------------------------------------------------------

    @staticmethod
    def _place_inserts(
        items: List[AlignmentItem], texts_b: List[str], used_b: Set[int]
    ) -> List[AlignmentItem]:
        """Put every unused revised sentence right after its B-side predecessor"""
        position_of_b = {}
        for pos, item in enumerate(items):
            for b_idx in item.b_indices:
                position_of_b[b_idx] = pos

        # -1 collects inserts without a matched predecessor (placed first)
        inserts_after = {}
        last_pos = -1
        for b_idx, text_b in enumerate(texts_b):
            if b_idx in used_b:
                last_pos = position_of_b[b_idx]
                continue
            inserts_after.setdefault(last_pos, []).append(
                AlignmentItem(type=AlignmentType.INSERT, b=text_b, b_indices=[b_idx])
            )

        result = list(inserts_after.get(-1, []))
        for pos, item in enumerate(items):
            result.append(item)
            result.extend(inserts_after.get(pos, []))
        return result

    # ------------------------------------------------------------------
    # Phase 7: line numbers
    # ------------------------------------------------------------------

    @staticmethod
    def _attach_line_numbers(
        items: List[AlignmentItem], seq_a: List[Sentence], seq_b: List[Sentence]
    ):
        for item in items:
            lines_a = [seq_a[i].line_number for i in item.a_indices]
            lines_b = [seq_b[i].line_number for i in item.b_indices]
            item.a_line_numbers = lines_a if any(n is not None for n in lines_a) else []
            item.b_line_numbers = lines_b if any(n is not None for n in lines_b) else []


def align_sentences(
    sentences_a: Iterable[SentenceLike],
    sentences_b: Iterable[SentenceLike],
    options: Optional[AlignmentOptions] = None,
    tokenizer: Optional[Tokenizer] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> List[AlignmentItem]:
    """Align an original and a revised sentence sequence.

    Args:
        sentences_a: Original sentences (str, (text, line) or Sentence)
        sentences_b: Revised sentences
        options: AlignmentOptions, validated before any work
        tokenizer: Needed only for word-granularity similarity
        should_cancel: Polled once per original sentence

    Returns:
        Ordered AlignmentItem list; every index of both inputs is covered
        exactly once.

    Raises:
        ConfigurationError: options out of range
        AlignmentCancelled: should_cancel() returned True
    """
    aligner = AnchorAligner(options, tokenizer=tokenizer, should_cancel=should_cancel)
    return aligner.align(sentences_a, sentences_b)
