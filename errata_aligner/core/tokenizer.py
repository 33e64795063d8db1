"""Tokenizer capability consumed by the word-level similarity and the extractor.

The alignment core never segments text itself. It talks to any object with
the two methods of :class:`Tokenizer`; :class:`JiebaTokenizer` is the
implementation shipped with the package.
"""

from dataclasses import dataclass
from typing import List, Protocol
import logging

import jieba


CUT_MODES = ("default", "search")


@dataclass(frozen=True)
class Token:
    """One token with its character span in the tokenized text"""

    word: str
    start: int
    end: int


class Tokenizer(Protocol):
    """Segmenter interface (cut + tokenize)"""

    def cut(self, text: str, use_hmm: bool = True) -> List[str]:
        ...

    def tokenize(
        self, text: str, mode: str = "default", use_hmm: bool = True
    ) -> List[Token]:
        ...


def cut_words(
    tokenizer: Tokenizer, text: str, mode: str = "default", use_hmm: bool = True
) -> List[str]:
    """Segment text with the requested mode and drop whitespace-only tokens.

    ``default`` uses ``cut``; ``search`` uses the search-oriented
    ``tokenize`` output, which also yields the shorter words contained in
    long ones.
    """
    if mode == "search":
        words = [t.word for t in tokenizer.tokenize(text, "search", use_hmm)]
    else:
        words = tokenizer.cut(text, use_hmm)
    return [w for w in words if w.strip()]


class JiebaTokenizer:
    """Tokenizer backed by a private ``jieba.Tokenizer`` instance.

    The dictionary is loaded lazily on first use. Each instance owns its own
    jieba tokenizer, so callers that need a custom dictionary create one
    instance and pass it around explicitly.
    """

    def __init__(self, dictionary: str = None, user_words: List[str] = None):
        # jieba prints its dictionary-loading chatter at DEBUG/INFO
        jieba.setLogLevel(logging.WARNING)
        if dictionary:
            self._jieba = jieba.Tokenizer(dictionary=dictionary)
        else:
            self._jieba = jieba.Tokenizer()
        for word in user_words or []:
            self.add_word(word)

    def add_word(self, word: str, freq: int = None, tag: str = None):
        self._jieba.add_word(word, freq, tag)

    def cut(self, text: str, use_hmm: bool = True) -> List[str]:
        return self._jieba.lcut(text, HMM=use_hmm)

    def tokenize(
        self, text: str, mode: str = "default", use_hmm: bool = True
    ) -> List[Token]:
        if mode not in CUT_MODES:
            raise ValueError(f"Unknown tokenize mode: {mode!r}")
        return [
            Token(word, start, end)
            for word, start, end in self._jieba.tokenize(text, mode=mode, HMM=use_hmm)
        ]
