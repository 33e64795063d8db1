"""
Word error collection over a sentence alignment.

For every MATCH item with text on both sides, both sentences are split into
clauses, the clauses are paired, and each clause pair is checked for a
single word substitution. Results are deduplicated by (wrong, correct); each
key keeps the distinct clauses it was seen in.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple
import logging

from ..alignment.base import (
    AlignmentCancelled,
    AlignmentItem,
    AlignmentType,
    CancelCheck,
)
from ..config import CollectorOptions
from ..core.splitter import split_clauses
from ..core.tokenizer import Tokenizer
from .clauses import align_clauses, clause_scorer
from .extractor import extract_word_replacement
from .models import WordReplacement


class WordErrorCollector:
    """Accumulates deduplicated word replacements.

    One collector may be fed several alignments; ``rows()`` always reflects
    everything seen so far, grouped by first appearance of each key.
    """

    def __init__(
        self,
        tokenizer: Tokenizer,
        options: Optional[CollectorOptions] = None,
        should_cancel: Optional[CancelCheck] = None,
    ):
        if tokenizer is None:
            raise ValueError("WordErrorCollector requires a tokenizer")
        self.tokenizer = tokenizer
        self.options = (options or CollectorOptions()).validate()
        self.should_cancel = should_cancel
        self.logger = logging.getLogger(__name__)
        self._scorer = clause_scorer(self.options, tokenizer)
        self._groups: Dict[Tuple[str, str], List[str]] = {}

    def add(self, replacement: WordReplacement) -> bool:
        """Record one replacement; False when the triple was already known"""
        clauses = self._groups.setdefault(replacement.key, [])
        if replacement.clause in clauses:
            return False
        clauses.append(replacement.clause)
        return True

    def add_sentence_pair(self, sentence_a: str, sentence_b: str) -> int:
        """Collect from one matched sentence pair, returning the new row count"""
        clauses_a = split_clauses(sentence_a, self.options.delimiters)
        clauses_b = split_clauses(sentence_b, self.options.delimiters)
        pairs = align_clauses(
            clauses_a, clauses_b, self.options, self.tokenizer, scorer=self._scorer
        )
        added = 0
        for pair in pairs:
            replacement = extract_word_replacement(
                pair.clause_a, pair.clause_b, self.tokenizer, self.options.cut_mode
            )
            if replacement is not None and self.add(replacement):
                added += 1
        return added

    def collect(self, items: Iterable[AlignmentItem]) -> List[WordReplacement]:
        matched = 0
        for item in items:
            if item.type != AlignmentType.MATCH or not item.a or not item.b:
                continue
            if self.should_cancel is not None and self.should_cancel():
                raise AlignmentCancelled(self.rows())
            matched += 1
            self.add_sentence_pair(item.a, item.b)

        rows = self.rows()
        self.logger.info(
            f"Collected {len(rows)} word error(s) from {matched} matched pair(s)"
        )
        return rows

    @property
    def groups(self) -> Dict[Tuple[str, str], Set[str]]:
        return {key: set(clauses) for key, clauses in self._groups.items()}

    def rows(self) -> List[WordReplacement]:
        """One row per distinct (wrong, correct, clause) triple"""
        return [
            WordReplacement(wrong, correct, clause)
            for (wrong, correct), clauses in self._groups.items()
            for clause in clauses
        ]


def collect_word_errors(
    items: Iterable[AlignmentItem],
    tokenizer: Tokenizer,
    options: Optional[CollectorOptions] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> List[WordReplacement]:
    """Collect deduplicated word replacements from an alignment.

    Raises:
        ConfigurationError: options out of range
        AlignmentCancelled: should_cancel() returned True; ``partial`` holds
            the rows collected so far
    """
    return WordErrorCollector(tokenizer, options, should_cancel).collect(items)


def group_word_errors(
    rows: Iterable[WordReplacement],
) -> Dict[Tuple[str, str], Set[str]]:
    """Deduplicate rows into {(wrong, correct): {clause, ...}}"""
    groups: Dict[Tuple[str, str], Set[str]] = {}
    for row in rows:
        groups.setdefault(row.key, set()).add(row.clause)
    return groups
