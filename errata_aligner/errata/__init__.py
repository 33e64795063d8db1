"""勘误模块

小句对齐、单词替换提取与错误词语收集。
"""

from .models import ClausePair, WordReplacement
from .clauses import align_clauses
from .extractor import extract_word_replacement
from .collector import WordErrorCollector, collect_word_errors, group_word_errors

__all__ = [
    "ClausePair",
    "WordReplacement",
    "align_clauses",
    "extract_word_replacement",
    "WordErrorCollector",
    "collect_word_errors",
    "group_word_errors",
]
