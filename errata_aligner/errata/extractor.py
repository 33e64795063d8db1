"""
Single word replacement extraction from a clause pair.

Both clauses are tokenized and diffed token by token; a replacement is
reported only when the diff removes exactly one token and adds exactly one
token. Anything else (no change, several edits, pure insertion) yields None.
"""

from difflib import SequenceMatcher
from typing import List, Optional, Tuple
import logging

from ..core.tokenizer import Tokenizer, cut_words
from .models import WordReplacement


logger = logging.getLogger(__name__)


def diff_tokens(
    tokens_a: List[str], tokens_b: List[str]
) -> Tuple[List[str], List[str]]:
    """Tokens removed from ``tokens_a`` and tokens added by ``tokens_b``"""
    matcher = SequenceMatcher(None, tokens_a, tokens_b, autojunk=False)
    removed: List[str] = []
    added: List[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "delete"):
            removed.extend(tokens_a[i1:i2])
        if tag in ("replace", "insert"):
            added.extend(tokens_b[j1:j2])
    return removed, added


def extract_word_replacement(
    clause_a: str,
    clause_b: str,
    tokenizer: Tokenizer,
    mode: str = "default",
) -> Optional[WordReplacement]:
    """Return the one-word substitution turning clause_a into clause_b, if any.

    Tokenizer failures are treated as "no replacement".
    """
    try:
        tokens_a = cut_words(tokenizer, clause_a, mode)
        tokens_b = cut_words(tokenizer, clause_b, mode)
    except Exception as e:
        logger.debug(f"Tokenization failed for {clause_a!r} / {clause_b!r}: {e}")
        return None

    if not tokens_a or not tokens_b:
        return None

    removed, added = diff_tokens(tokens_a, tokens_b)
    removed = [t for t in removed if t.strip()]
    added = [t for t in added if t.strip()]
    if len(removed) != 1 or len(added) != 1:
        return None

    return WordReplacement(removed[0], added[0], clause_a.strip())
