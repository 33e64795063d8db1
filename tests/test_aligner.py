"""句子对齐测试"""

import random

import pytest

from errata_aligner.alignment import (
    AlignmentCancelled,
    AlignmentType,
    AnchorAligner,
    align_sentences,
    alignment_statistics,
)
from errata_aligner.config import AlignmentOptions, ConfigurationError
from errata_aligner.core.splitter import Sentence


SAMPLE_A = ["今天天气很好。", "他去了五伯家。", "我们明天见。"]
SAMPLE_B = ["今天天气不错。", "他去了五百家。", "我们明天见。"]


def types_of(items):
    return [item.type for item in items]


STEMS_AND_BRANCHES = "甲乙丙丁戊己庚辛壬癸子丑寅卯辰巳午未申酉戌亥"
EXTRA_CHARS = "金木水火土日月星"


def random_sentence(rng, alphabet=STEMS_AND_BRANCHES[:20]):
    return "".join(rng.choice(alphabet) for _ in range(rng.randint(1, 5))) + "。"


def mutate(rng, sentences):
    """随机删句、插句、换位和改字，模拟一次校对"""
    result = list(sentences)
    for _ in range(rng.randint(0, 4)):
        action = rng.choice(["delete", "insert", "swap", "substitute"])
        if action == "insert" or not result:
            result.insert(rng.randint(0, len(result)), random_sentence(rng))
        elif action == "delete":
            del result[rng.randrange(len(result))]
        elif action == "swap":
            i, j = rng.randrange(len(result)), rng.randrange(len(result))
            result[i], result[j] = result[j], result[i]
        else:
            i = rng.randrange(len(result))
            chars = list(result[i])
            chars[rng.randrange(len(chars))] = rng.choice(STEMS_AND_BRANCHES)
            result[i] = "".join(chars)
    return result


def test_identity_alignment(check_totality):
    """相同序列只产生 MATCH，相似度均为 1.0"""
    items = align_sentences(SAMPLE_A, SAMPLE_A)
    assert types_of(items) == [AlignmentType.MATCH] * 3
    assert [item.similarity for item in items] == [1.0, 1.0, 1.0]
    assert [item.b_indices for item in items] == [[0], [1], [2]]
    check_totality(items, 3, 3)


def test_identity_with_repeated_sentences():
    """重复句子优先匹配离锚点最近的位置"""
    sentences = ["好的。", "不好。", "好的。"]
    items = align_sentences(sentences, sentences)
    assert [item.a_indices for item in items] == [[0], [1], [2]]
    assert [item.b_indices for item in items] == [[0], [1], [2]]


def test_typo_scenario(typo_sentences):
    sentences_a, sentences_b = typo_sentences
    items = align_sentences(sentences_a, sentences_b)
    assert types_of(items) == [AlignmentType.MATCH, AlignmentType.MATCH]
    assert items[1].similarity == pytest.approx(0.75)


def test_degenerate_inputs():
    assert align_sentences([], []) == []

    items = align_sentences([], ["甲。", "乙。"])
    assert types_of(items) == [AlignmentType.INSERT, AlignmentType.INSERT]
    assert [item.b_indices for item in items] == [[0], [1]]

    items = align_sentences(["甲。", "乙。"], [])
    assert types_of(items) == [AlignmentType.DELETE, AlignmentType.DELETE]


def test_delete_and_insert(check_totality):
    sentences_a = ["今天天气很好。", "这一句被删掉了。", "我们明天见。"]
    sentences_b = ["今天天气很好。", "我们明天见。", "新加的一句话！"]
    items = align_sentences(sentences_a, sentences_b)
    assert types_of(items) == [
        AlignmentType.MATCH,
        AlignmentType.DELETE,
        AlignmentType.MATCH,
        AlignmentType.INSERT,
    ]
    assert items[1].a == "这一句被删掉了。"
    assert items[1].b is None
    assert items[3].b == "新加的一句话！"
    check_totality(items, 3, 3)


def test_leading_insert_goes_first():
    items = align_sentences(["我们明天见。"], ["新加的一句话！", "我们明天见。"])
    assert types_of(items) == [AlignmentType.INSERT, AlignmentType.MATCH]


def test_move_scenario(check_totality):
    """窗口太小时，扩展窗口找到的远处句子被识别为移动"""
    sentences_a = ["第一句。", "第二句。", "第三句。"]
    sentences_b = ["第三句。", "第一句。", "第二句。"]
    items = align_sentences(sentences_a, sentences_b, AlignmentOptions(window_size=1))

    assert types_of(items) == [
        AlignmentType.MOVEIN,
        AlignmentType.MATCH,
        AlignmentType.MATCH,
        AlignmentType.MOVEOUT,
    ]
    movein, moveout = items[0], items[3]
    assert movein.b == "第三句。" and movein.b_indices == [0]
    assert moveout.a == "第三句。" and moveout.a_indices == [2]
    assert movein.a is None and moveout.b is None
    assert movein.move_id == moveout.move_id is not None

    stats = alignment_statistics(items)
    assert stats.delete == 0 and stats.insert == 0
    check_totality(items, 3, 3)


def test_sentence_split_in_revision(check_totality):
    """修订稿把一句拆成两句时合并为一个 MATCH"""
    items = align_sentences(
        ["今天天气很好，我们去公园散步吧。"],
        ["今天天气很好。", "我们去公园散步吧。"],
    )
    assert types_of(items) == [AlignmentType.MATCH]
    assert items[0].b_indices == [0, 1]
    assert items[0].b == "今天天气很好。我们去公园散步吧。"
    assert items[0].similarity == pytest.approx(14 / 15)
    check_totality(items, 1, 2)


def test_sentences_merged_in_revision(check_totality):
    items = align_sentences(
        ["今天天气很好。", "我们去公园散步吧。"],
        ["今天天气很好，我们去公园散步吧。"],
    )
    assert types_of(items) == [AlignmentType.MATCH]
    assert items[0].a_indices == [0, 1]
    check_totality(items, 2, 1)


def test_identity_with_offset_and_tied_scores():
    """offset 只放宽窗口，得分相同时仍选紧接上一匹配的位置"""
    sentences = [
        "巳酉申未。",
        "己未卯。",
        "辰辛。",
        "巳丙丑。",
        "巳丑丙巳。",
        "申庚。",
        "甲壬壬午庚。",
        "子甲。",
    ]
    for offset in (0, 1, 2, 3):
        items = align_sentences(
            sentences, sentences, AlignmentOptions(window_size=3, offset=offset)
        )
        assert types_of(items) == [AlignmentType.MATCH] * len(sentences)
        assert [item.b_indices for item in items] == [[i] for i in range(len(sentences))]


@pytest.mark.parametrize("seed", range(20))
def test_random_identity(seed):
    """随机序列与自身对齐只产生按序的 MATCH"""
    rng = random.Random(seed)
    sentences = [random_sentence(rng) for _ in range(rng.randint(1, 12))]
    options = AlignmentOptions(
        window_size=rng.randint(1, 4),
        offset=rng.randint(0, 3),
        similarity_threshold=rng.choice([0.0, 0.4, 0.6, 1.0]),
    )
    items = align_sentences(sentences, sentences, options)
    assert types_of(items) == [AlignmentType.MATCH] * len(sentences)
    assert [item.b_indices for item in items] == [[i] for i in range(len(sentences))]


@pytest.mark.parametrize("seed", range(40))
def test_random_totality(seed, check_totality):
    """随机修改后的序列：每个下标恰好出现一次，统计与条目一致"""
    rng = random.Random(seed)
    sentences_a = [random_sentence(rng) for _ in range(rng.randint(0, 12))]
    sentences_b = mutate(rng, sentences_a)
    options = AlignmentOptions(
        window_size=rng.randint(1, 4),
        offset=rng.randint(0, 3),
        similarity_threshold=rng.choice([0.0, 0.2, 0.4, 0.6, 0.8, 1.0]),
        max_window_expansion=rng.randint(0, 3),
        consecutive_fail_threshold=rng.randint(1, 3),
    )
    items = align_sentences(sentences_a, sentences_b, options)
    check_totality(items, len(sentences_a), len(sentences_b))

    stats = alignment_statistics(items)
    assert stats.total == len(items)
    assert stats.moveout == stats.movein
    assert (
        stats.match + stats.delete + stats.insert + stats.moveout + stats.movein
        == stats.total
    )


@pytest.mark.parametrize("seed", range(20))
def test_monotonic_threshold_for_in_place_edits(seed):
    """各句字符互不相交、只做原位改字时，提高阈值匹配数单调不增"""
    rng = random.Random(seed)
    pool = list(STEMS_AND_BRANCHES + EXTRA_CHARS)
    rng.shuffle(pool)
    sentences_a, sentences_b = [], []
    # 每对句子独占 4 个字符：3 个出现在原文，第 4 个用于替换
    for i in range(rng.randint(1, 6)):
        own = pool[i * 4 : i * 4 + 4]
        original = own[:3]
        revised = list(original)
        for pos in rng.sample(range(1, 3), rng.randint(0, 2)):
            revised[pos] = own[3]
        sentences_a.append("".join(original))
        sentences_b.append("".join(revised))

    matches, unmatched = [], []
    for threshold in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0):
        items = align_sentences(
            sentences_a,
            sentences_b,
            AlignmentOptions(window_size=10, similarity_threshold=threshold),
        )
        stats = alignment_statistics(items)
        assert stats.moveout == 0
        matches.append(stats.match)
        unmatched.append(stats.delete + stats.insert)
    assert matches == sorted(matches, reverse=True)
    assert unmatched == sorted(unmatched)
    assert matches[0] == len(sentences_a)


def test_line_numbers_attached():
    items = align_sentences(
        [Sentence("今天天气很好。", 3), Sentence("他去了五伯家。", 5)],
        [("今天天气很好。", 1), ("他去了五百家。", 2)],
    )
    assert items[1].a_line_number == 5
    assert items[1].b_line_number == 2
    assert str(items[1].a_location) == "a@{5}[1]"
    assert repr(items[1]) == "AlignmentItem(match, a@{5}[1], b@{2}[1], sim=0.750)"
    assert items[1].to_dict()["b_line_numbers"] == [2]


def test_plain_strings_have_no_line_numbers():
    items = align_sentences(["甲。"], ["甲。"])
    assert items[0].a_line_numbers == []
    assert items[0].a_line_number is None


def test_invalid_options_rejected_before_work():
    with pytest.raises(ConfigurationError):
        align_sentences(["甲。"], ["甲。"], AlignmentOptions(window_size=0))


def test_cancellation_returns_partial_results():
    answers = iter([False, True])
    with pytest.raises(AlignmentCancelled) as excinfo:
        align_sentences(SAMPLE_A, SAMPLE_A, should_cancel=lambda: next(answers))
    partial = excinfo.value.partial
    assert len(partial) == 1
    assert partial[0].type == AlignmentType.MATCH
    assert partial[0].a_indices == [0]


def test_word_granularity_with_tokenizer(tokenizer, typo_sentences):
    sentences_a, sentences_b = typo_sentences
    aligner = AnchorAligner(AlignmentOptions(ngram_granularity="word"), tokenizer=tokenizer)
    items = aligner.align(sentences_a, sentences_b)
    assert types_of(items) == [AlignmentType.MATCH, AlignmentType.MATCH]
    assert items[1].similarity == pytest.approx(5 / 7)


def test_statistics_consistency():
    for items in (
        align_sentences(SAMPLE_A, SAMPLE_B, AlignmentOptions(similarity_threshold=0.8)),
        align_sentences(
            ["第一句。", "第二句。", "第三句。"],
            ["第三句。", "第一句。", "第二句。"],
            AlignmentOptions(window_size=1),
        ),
    ):
        stats = alignment_statistics(items)
        assert stats.total == len(items)
        assert (
            stats.match + stats.delete + stats.insert + stats.moveout + stats.movein
            == stats.total
        )
