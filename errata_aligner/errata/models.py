"""勘误数据模型

小句对与词语替换记录。
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ClausePair:
    """原文小句与修订小句的配对"""

    clause_a: str
    clause_b: str


@dataclass(frozen=True)
class WordReplacement:
    """单词替换：原文中的错误词语、修订后的正确词语及其所在小句"""

    wrong: str
    correct: str
    clause: str  # 原文小句（已去除首尾空白）

    @property
    def key(self):
        return (self.wrong, self.correct)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "wrong": self.wrong,
            "correct": self.correct,
            "clause": self.clause,
            "wrong_length": len(self.wrong),
            "correct_length": len(self.correct),
        }
