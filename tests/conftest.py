"""Pytest 配置和 fixtures

定义所有测试共享的 fixtures 和配置。分词器使用固定词典的正向最大匹配，
测试结果不依赖 jieba 词典。
"""

from typing import List

import pytest

from errata_aligner.alignment.base import AlignmentItem, AlignmentType
from errata_aligner.config import AlignmentOptions, CollectorOptions
from errata_aligner.core.tokenizer import Token


DICTIONARY = {"今天", "明天", "天气", "很好", "五伯", "五百", "东西", "公园", "散步"}


class DictTokenizer:
    """Forward maximum matching over a fixed word list"""

    def __init__(self, words=DICTIONARY, max_len: int = 4):
        self.words = set(words)
        self.max_len = max_len

    def cut(self, text: str, use_hmm: bool = True) -> List[str]:
        tokens = []
        i = 0
        while i < len(text):
            for size in range(min(self.max_len, len(text) - i), 0, -1):
                piece = text[i : i + size]
                if size == 1 or piece in self.words:
                    tokens.append(piece)
                    i += size
                    break
        return tokens

    def tokenize(self, text: str, mode: str = "default", use_hmm: bool = True):
        tokens = []
        pos = 0
        for word in self.cut(text):
            tokens.append(Token(word, pos, pos + len(word)))
            pos += len(word)
        return tokens


class BrokenTokenizer:
    """分词总是失败"""

    def cut(self, text, use_hmm=True):
        raise RuntimeError("dictionary not loaded")

    def tokenize(self, text, mode="default", use_hmm=True):
        raise RuntimeError("dictionary not loaded")


@pytest.fixture
def tokenizer():
    """固定词典分词器"""
    return DictTokenizer()


@pytest.fixture
def broken_tokenizer():
    return BrokenTokenizer()


@pytest.fixture
def options():
    """默认对齐选项"""
    return AlignmentOptions()


@pytest.fixture
def collector_options():
    """默认收集选项"""
    return CollectorOptions()


@pytest.fixture
def typo_sentences():
    """一处错别字（五伯 → 五百）的原文与修订稿"""
    return (
        ["今天天气很好。", "他去了五伯家。"],
        ["今天天气很好。", "他去了五百家。"],
    )


@pytest.fixture
def check_totality():
    """断言每个原文/修订稿句子下标恰好出现一次"""

    def _check(items: List[AlignmentItem], len_a: int, len_b: int):
        a_seen = [
            idx
            for item in items
            if item.type
            in (AlignmentType.MATCH, AlignmentType.DELETE, AlignmentType.MOVEOUT)
            for idx in item.a_indices
        ]
        b_seen = [
            idx
            for item in items
            if item.type
            in (AlignmentType.MATCH, AlignmentType.INSERT, AlignmentType.MOVEIN)
            for idx in item.b_indices
        ]
        assert sorted(a_seen) == list(range(len_a))
        assert sorted(b_seen) == list(range(len_b))

    return _check
