"""
Core text modules: punctuation, tokenization, similarity and splitting.
"""

from ..config import parse_delimiters
from .punctuation import PunctuationHandler
from .similarity import (
    CharNgramStrategy,
    SimilarityScorer,
    WordNgramStrategy,
    jaccard_similarity,
    normalize_for_similarity,
    similarity,
)
from .splitter import (
    Sentence,
    SentenceSplitter,
    as_sentences,
    is_meaningful_clause,
    split_clauses,
)
from .tokenizer import JiebaTokenizer, Token, Tokenizer, cut_words

__all__ = [
    "PunctuationHandler",
    "CharNgramStrategy",
    "SimilarityScorer",
    "WordNgramStrategy",
    "jaccard_similarity",
    "normalize_for_similarity",
    "similarity",
    "Sentence",
    "SentenceSplitter",
    "as_sentences",
    "is_meaningful_clause",
    "parse_delimiters",
    "split_clauses",
    "JiebaTokenizer",
    "Token",
    "Tokenizer",
    "cut_words",
]
