"""
N-gram Jaccard similarity shared by the sentence aligner and the clause aligner.

Scores are computed on normalized text (trimmed, optionally stripped of inner
whitespace, punctuation, digits, Latin letters and footnote markers). The
n-gram unit is chosen once per run by injecting a strategy: character
n-grams by default, word n-grams when a tokenizer is supplied.
"""

from typing import Dict, FrozenSet, Optional, Sequence, Tuple
import logging
import re

from ..config import AlignmentOptions
from .punctuation import PunctuationHandler
from .tokenizer import Tokenizer, cut_words


logger = logging.getLogger(__name__)

# ASCII 0-9, full-width ０-９ and circled/parenthesized digits ①⑴⒈⓪㊀
DIGITS_PATTERN = re.compile(
    r"[\d０-９①-⒛⓪⓵-⓾㊀-㊉]"
)
LATIN_PATTERN = re.compile(r"[A-Za-zＡ-Ｚａ-ｚ]")
MARKDOWN_FOOTNOTE_PATTERN = re.compile(r"\[\^[^\]]*\]")
SUPERSCRIPT_MARKER_PATTERN = re.compile(r"\^[^^]+\^")
WHITESPACE_PATTERN = re.compile(r"\s")


def normalize_for_similarity(
    text: str,
    remove_inner_whitespace: bool = True,
    remove_punctuation: bool = False,
    remove_digits: bool = False,
    remove_latin: bool = False,
    remove_footnote_markers: bool = False,
) -> str:
    """Normalize a span before scoring.

    Leading/trailing whitespace is always removed. Inner whitespace (including
    line breaks inside a sentence) is removed by default; the other switches
    are off by default.
    """
    s = (text or "").strip()
    if remove_footnote_markers:
        s = MARKDOWN_FOOTNOTE_PATTERN.sub("", s)
        s = SUPERSCRIPT_MARKER_PATTERN.sub("", s)
    if remove_inner_whitespace:
        s = WHITESPACE_PATTERN.sub("", s)
    if remove_punctuation:
        s = PunctuationHandler.strip_punctuation(s)
    if remove_digits:
        s = DIGITS_PATTERN.sub("", s)
    if remove_latin:
        s = LATIN_PATTERN.sub("", s)
    return s


class NgramStrategy:
    """Turns a normalized text into its n-gram units"""

    def __init__(self, n: int = 1):
        self.n = max(1, int(n))

    def units(self, text: str) -> Sequence[str]:
        raise NotImplementedError

    def ngrams(self, text: str) -> Optional[FrozenSet[str]]:
        """N-gram set of text, or None when text has fewer than n units"""
        units = self.units(text)
        if len(units) < self.n:
            return None
        return frozenset(
            self.join(units[i : i + self.n]) for i in range(len(units) - self.n + 1)
        )

    def join(self, units: Sequence[str]) -> str:
        return "".join(units)


class CharNgramStrategy(NgramStrategy):
    """Character n-grams (default, needs no tokenizer)"""

    def units(self, text: str) -> Sequence[str]:
        return text

    def __repr__(self):
        return f"CharNgramStrategy(n={self.n})"


class WordNgramStrategy(NgramStrategy):
    """Token n-grams; segmentation is delegated to the injected tokenizer"""

    def __init__(self, tokenizer: Tokenizer, n: int = 1, cut_mode: str = "default"):
        super().__init__(n)
        self.tokenizer = tokenizer
        self.cut_mode = cut_mode

    def units(self, text: str) -> Sequence[str]:
        return cut_words(self.tokenizer, text, self.cut_mode)

    def join(self, units: Sequence[str]) -> str:
        return "|".join(units)

    def __repr__(self):
        return f"WordNgramStrategy(n={self.n}, cut_mode={self.cut_mode!r})"


def jaccard_similarity(text_a: str, text_b: str, strategy: NgramStrategy) -> float:
    """Jaccard similarity of the n-gram sets of two normalized texts.

    Empty input never matches. When either side has fewer units than the
    n-gram size, the score degrades to plain equality.
    """
    if not text_a or not text_b:
        return 0.0
    if text_a == text_b:
        return 1.0

    ngrams_a = strategy.ngrams(text_a)
    ngrams_b = strategy.ngrams(text_b)
    if ngrams_a is None or ngrams_b is None:
        return 0.0

    intersection = len(ngrams_a & ngrams_b)
    union = len(ngrams_a) + len(ngrams_b) - intersection
    if union == 0:
        return 0.0
    return intersection / union


class SimilarityScorer:
    """Per-run scoring context.

    Built once from the options (and an optional tokenizer) and handed to the
    aligner, it fixes the normalization switches and the n-gram strategy for
    the whole run. Normalized texts and scores are memoized on the instance
    only, so two scorers never share state.
    """

    def __init__(
        self,
        options: Optional[AlignmentOptions] = None,
        tokenizer: Optional[Tokenizer] = None,
        strategy: Optional[NgramStrategy] = None,
    ):
        self.options = (options or AlignmentOptions()).validate()
        if strategy is not None:
            self.strategy = strategy
        elif self.options.ngram_granularity == "word" and tokenizer is not None:
            self.strategy = WordNgramStrategy(
                tokenizer, self.options.ngram_size, self.options.cut_mode
            )
        else:
            self.strategy = CharNgramStrategy(self.options.ngram_size)
        self._normalized: Dict[str, str] = {}
        self._scores: Dict[Tuple[str, str], float] = {}
        logger.debug(f"SimilarityScorer using {self.strategy!r}")

    def normalize(self, text: str) -> str:
        cached = self._normalized.get(text)
        if cached is None:
            opts = self.options
            cached = normalize_for_similarity(
                text,
                remove_inner_whitespace=opts.remove_inner_whitespace,
                remove_punctuation=opts.remove_punctuation,
                remove_digits=opts.remove_digits,
                remove_latin=opts.remove_latin,
                remove_footnote_markers=opts.remove_footnote_markers,
            )
            self._normalized[text] = cached
        return cached

    def score(self, text_a: str, text_b: str) -> float:
        """Similarity of two raw spans, in [0, 1]"""
        norm_a = self.normalize(text_a)
        norm_b = self.normalize(text_b)
        key = (norm_a, norm_b)
        if key not in self._scores:
            self._scores[key] = jaccard_similarity(norm_a, norm_b, self.strategy)
        return self._scores[key]

    __call__ = score


def similarity(
    text_a: str,
    text_b: str,
    options: Optional[AlignmentOptions] = None,
    tokenizer: Optional[Tokenizer] = None,
) -> float:
    """One-off similarity of two texts under the given options"""
    return SimilarityScorer(options, tokenizer).score(text_a, text_b)
