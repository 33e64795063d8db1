import re

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from ..config import DEFAULT_CLAUSE_DELIMITERS
from .punctuation import PunctuationHandler


@dataclass(frozen=True)
class Sentence:
    """A sentence of a SentenceSequence with its optional 1-based source line"""

    text: str
    line_number: Optional[int] = None


SentenceLike = Union[str, Sentence, Tuple[str, Optional[int]]]


def as_sentences(items: Optional[Iterable[SentenceLike]]) -> List[Sentence]:
    """Normalize plain strings, (text, line) tuples or Sentence objects"""
    sentences = []
    for item in items or []:
        if isinstance(item, Sentence):
            sentences.append(item)
        elif isinstance(item, str):
            sentences.append(Sentence(item))
        else:
            text, line_number = item
            sentences.append(Sentence(text, line_number))
    return sentences


class SentenceSplitter:
    """Minimal Chinese/English sentence splitter that never splits inside quotes/brackets"""

    # Unified sentence endings
    SENTENCE_END_PATTERN = r"[.!?。！？]"

    # Quote/bracket pairs (open → close)
    PAIRS = {
        '"': '"',
        "“": "”",
        "‘": "’",
        "「": "」",
        "『": "』",
        "(": ")",
        "（": "）",
        "[": "]",
        "【": "】",
        "《": "》",
        "{": "}",
        "｛": "｝",
    }
    # All opening and closing symbols
    OPENERS = set(PAIRS.keys())
    CLOSERS = set(PAIRS.values())

    @classmethod
    def _is_part_of_ellipsis(cls, text: str, pos: int) -> bool:
        """Check if the '.' at position pos is part of an ellipsis (3+ consecutive dots)"""
        if pos >= len(text) or text[pos] != ".":
            return False

        start = pos
        while start > 0 and text[start - 1] == ".":
            start -= 1
        end = pos
        while end < len(text) - 1 and text[end + 1] == ".":
            end += 1
        return end - start + 1 >= 3

    @classmethod
    def _build_quote_context(cls, text: str) -> List[bool]:
        """
        Returns a boolean list in_quoted, where in_quoted[i] == True means position i is inside some quote/bracket pair.
        Only properly paired symbols count; unpaired ones are ignored.

        For symmetric quotes (opener == closer, like "), the first occurrence
        opens and the next one closes.
        """
        n = len(text)
        in_quoted = [False] * n
        stack = []  # (opener_char, start_index)

        for i, char in enumerate(text):
            # ASCII punctuation inside a word (e.g. the ' in it's) is not a quote
            if PunctuationHandler.is_between_ascii_letters(text, i):
                continue
            if char in cls.OPENERS and cls.PAIRS.get(char) == char:
                if stack and stack[-1][0] == char:
                    _, start = stack.pop()
                    for j in range(start + 1, i):
                        in_quoted[j] = True
                else:
                    stack.append((char, i))
            elif char in cls.OPENERS:
                stack.append((char, i))
            elif char in cls.CLOSERS and stack:
                last_opener, start = stack[-1]
                if char == cls.PAIRS[last_opener]:
                    for j in range(start + 1, i):
                        in_quoted[j] = True
                    stack.pop()
                # Type mismatch (like 「 closed by )), keep the stack as is

        # Unclosed openers are ignored
        return in_quoted

    @classmethod
    def find_split_points(cls, text: str) -> List[int]:
        """
        Split points after sentence-ending punctuation outside quotes/brackets.

        Closing symbols directly after the punctuation (like ？」) stay with
        the sentence; decimals, ASCII abbreviations and ellipses are skipped.
        """
        if not text:
            return []
        in_quoted = cls._build_quote_context(text)
        points = []

        for match in re.finditer(cls.SENTENCE_END_PATTERN, text):
            i = match.start()
            pos = match.end()

            if in_quoted[i]:
                continue
            if PunctuationHandler.should_skip_for_splitting(text, i):
                continue
            if cls._is_part_of_ellipsis(text, i):
                continue

            # Consecutive sentence-ending marks (like ？！) split once
            while pos < len(text) and re.match(cls.SENTENCE_END_PATTERN, text[pos]):
                pos += 1
            while pos < len(text) and text[pos] in cls.CLOSERS:
                pos += 1

            if 0 < pos < len(text) and (not points or points[-1] != pos):
                points.append(pos)

        return points

    @classmethod
    def split_sentences(cls, text: str) -> List[str]:
        """Split text into trimmed, non-empty sentences"""
        if not text.strip():
            return []

        sentences = []
        prev = 0
        for p in cls.find_split_points(text) + [len(text)]:
            sentence = text[prev:p].strip()
            if sentence:
                sentences.append(sentence)
            prev = p
        return sentences

    @classmethod
    def split_sentences_with_line_numbers(cls, text: str) -> List[Sentence]:
        """
        Split a document line by line and tag each sentence with the 1-based
        line number of its first character. Blank lines produce nothing; a
        sentence never spans lines.
        """
        sentences = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            for sentence in cls.split_sentences(line):
                sentences.append(Sentence(sentence, line_no))
        return sentences


# =============================
# Clause splitting (second alignment pass)
# =============================


def is_meaningful_clause(clause: str) -> bool:
    """A clause counts when it is non-empty after trimming and not pure whitespace/punctuation"""
    trimmed = (clause or "").strip()
    if not trimmed:
        return False
    return PunctuationHandler.has_content(trimmed)


def split_clauses(sentence: str, delimiters: Optional[Sequence[str]] = None) -> List[str]:
    """Split a sentence on any delimiter character, dropping the delimiters.

    Order is preserved; only meaningful clauses are kept, trimmed.
    """
    if not sentence:
        return []
    delimiters = delimiters or DEFAULT_CLAUSE_DELIMITERS
    pattern = "[" + "".join(re.escape(d) for d in delimiters) + "]"
    return [c.strip() for c in re.split(pattern, sentence) if is_meaningful_clause(c)]
