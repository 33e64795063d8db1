"""
Errata Aligner: sentence alignment and word error extraction for proofreading.
"""

import logging

from .api import ErrataAligner, align_texts, build_errata, calculate_similarity
from .config import (
    DEFAULT_CLAUSE_DELIMITERS,
    AlignmentOptions,
    CollectorOptions,
    ConfigurationError,
)
from .position import LocationRange
from . import core

# Alignment module
from .alignment import (
    AlignerBase,
    AlignmentCancelled,
    AlignmentItem,
    AlignmentStatistics,
    AlignmentType,
    AnchorAligner,
    align_sentences,
    alignment_statistics,
)
from .core import (
    JiebaTokenizer,
    Sentence,
    SentenceSplitter,
    SimilarityScorer,
    Tokenizer,
    split_clauses,
)

# Errata module
from . import errata
from .errata import (
    ClausePair,
    WordErrorCollector,
    WordReplacement,
    align_clauses,
    collect_word_errors,
    extract_word_replacement,
    group_word_errors,
)
from .output import OutputFormatter, format_word_errors_csv

__version__ = "0.3.0"
__all__ = [
    "ErrataAligner",
    "align_texts",
    "build_errata",
    "calculate_similarity",
    "DEFAULT_CLAUSE_DELIMITERS",
    "AlignmentOptions",
    "CollectorOptions",
    "ConfigurationError",
    "LocationRange",
    "AlignerBase",
    "AlignmentCancelled",
    "AlignmentItem",
    "AlignmentStatistics",
    "AlignmentType",
    "AnchorAligner",
    "align_sentences",
    "alignment_statistics",
    "JiebaTokenizer",
    "Sentence",
    "SentenceSplitter",
    "SimilarityScorer",
    "Tokenizer",
    "split_clauses",
    "ClausePair",
    "WordErrorCollector",
    "WordReplacement",
    "align_clauses",
    "collect_word_errors",
    "extract_word_replacement",
    "group_word_errors",
    "OutputFormatter",
    "format_word_errors_csv",
    "core",
    "errata",
]

# Configure default logging format to be minimal
_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("%(message)s"))
_logger = logging.getLogger("errata_aligner")
_logger.addHandler(_handler)
_logger.setLevel(logging.INFO)
# Disable propagation to avoid duplicate output under basicConfig
_logger.propagate = False
