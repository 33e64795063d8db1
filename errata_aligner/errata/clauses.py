"""
Clause alignment inside one matched sentence pair.

Greedy and first-come: every original clause, in order, takes the most
similar revised clause not yet taken, provided the score is strictly above
the clause threshold. There is no backtracking and unpaired clauses are
simply dropped.
"""

from typing import List, Optional, Sequence
import logging

import numpy as np

from ..config import AlignmentOptions, CollectorOptions
from ..core.similarity import SimilarityScorer
from ..core.splitter import is_meaningful_clause
from ..core.tokenizer import Tokenizer
from .models import ClausePair


logger = logging.getLogger(__name__)


def clause_scorer(
    options: CollectorOptions, tokenizer: Optional[Tokenizer] = None
) -> SimilarityScorer:
    """Word unigrams when a tokenizer is usable, character bigrams otherwise"""
    if tokenizer is not None and options.use_word_similarity:
        scoring = AlignmentOptions(
            ngram_size=1, ngram_granularity="word", cut_mode=options.cut_mode
        )
    else:
        scoring = AlignmentOptions(ngram_size=2, ngram_granularity="char")
    return SimilarityScorer(scoring, tokenizer)


def score_matrix(
    clauses_a: Sequence[str], clauses_b: Sequence[str], scorer: SimilarityScorer
) -> np.ndarray:
    """Pairwise clause similarities, shape (len(clauses_a), len(clauses_b))"""
    scores = np.zeros((len(clauses_a), len(clauses_b)), dtype=float)
    for i, clause_a in enumerate(clauses_a):
        for j, clause_b in enumerate(clauses_b):
            scores[i, j] = scorer.score(clause_a, clause_b)
    return scores


def align_clauses(
    clauses_a: Sequence[str],
    clauses_b: Sequence[str],
    options: Optional[CollectorOptions] = None,
    tokenizer: Optional[Tokenizer] = None,
    scorer: Optional[SimilarityScorer] = None,
) -> List[ClausePair]:
    """Pair original clauses with revised clauses.

    Args:
        clauses_a: Clauses of the original sentence
        clauses_b: Clauses of the revised sentence
        options: CollectorOptions (threshold, word similarity switch)
        tokenizer: Enables word-level scoring
        scorer: Reuse a scorer across calls (must match the options)

    Returns:
        ClausePair list in original clause order
    """
    options = (options or CollectorOptions()).validate()
    valid_a = [c for c in clauses_a if is_meaningful_clause(c)]
    valid_b = [c for c in clauses_b if is_meaningful_clause(c)]
    if not valid_a or not valid_b:
        return []

    scorer = scorer or clause_scorer(options, tokenizer)
    scores = score_matrix(valid_a, valid_b, scorer)
    available = np.ones(len(valid_b), dtype=bool)
    pairs: List[ClausePair] = []

    for i, clause_a in enumerate(valid_a):
        if not available.any():
            break
        # Taken clauses score below any real similarity; argmax keeps the first maximum
        row = np.where(available, scores[i], -1.0)
        j = int(np.argmax(row))
        if row[j] > options.clause_similarity_threshold:
            pairs.append(ClausePair(clause_a, valid_b[j]))
            available[j] = False

    logger.debug(f"Paired {len(pairs)} of {len(valid_a)} clauses")
    return pairs
