"""高层 API 与命令行测试"""

import json
import logging

import pytest

from errata_aligner.alignment import AlignmentType
from errata_aligner.api import ErrataAligner, align_texts, build_errata, calculate_similarity
from errata_aligner.cli import build_parser, main
from errata_aligner.errata import WordReplacement
from errata_aligner.utils import build_options_from_args, split_config


ORIGINAL = "今天天气很好。\n他去了五伯家。\n"
REVISED = "今天天气很好。\n他去了五百家。\n"


@pytest.fixture
def text_files(tmp_path):
    original = tmp_path / "original.txt"
    revised = tmp_path / "revised.txt"
    original.write_text(ORIGINAL, encoding="utf-8")
    revised.write_text(REVISED, encoding="utf-8")
    return original, revised


def test_align_texts_tracks_lines():
    items = align_texts(ORIGINAL, REVISED)
    assert [item.type for item in items] == [AlignmentType.MATCH, AlignmentType.MATCH]
    assert items[1].a_line_number == 2
    assert items[1].b_line_number == 2


def test_build_errata(tokenizer):
    result = build_errata(ORIGINAL, REVISED, tokenizer=tokenizer)
    assert result["statistics"].match == 2
    assert result["word_errors"] == [WordReplacement("五伯", "五百", "他去了五伯家")]


def test_calculate_similarity():
    assert calculate_similarity("第三句。", "第一句。") == pytest.approx(0.6)
    assert calculate_similarity("五伯家", "五百家", ngramSize=2) == 0.0


def test_split_config():
    alignment, collector = split_config(
        {"windowSize": 5, "clauseSimilarityThreshold": 0.5, "cut_mode": "search"}
    )
    assert alignment == {"window_size": 5, "cut_mode": "search"}
    assert collector == {"clause_similarity_threshold": 0.5, "cut_mode": "search"}


def test_build_options_from_args():
    args = build_parser().parse_args(
        ["--window-size", "4", "--threshold", "0.5", "--keep-inner-whitespace"]
    )
    assert build_options_from_args(args) == {
        "window_size": 4,
        "similarity_threshold": 0.5,
        "remove_inner_whitespace": False,
    }


def test_errata_aligner_run_and_save(text_files, tmp_path, tokenizer):
    original, revised = text_files
    aligner = ErrataAligner(str(original), str(revised), tokenizer=tokenizer, windowSize=5)
    result = aligner.run()
    assert result["word_errors"] == [WordReplacement("五伯", "五百", "他去了五伯家")]

    saved = aligner.save_results(result, str(tmp_path / "out"))
    with open(saved["io"]["csv_path"], encoding="utf-8") as f:
        assert f.read().splitlines()[1] == "五伯,五百,他去了五伯家,2,2"
    with open(saved["io"]["report_path"], encoding="utf-8") as f:
        report = json.load(f)
    assert report["options"]["alignment"]["window_size"] == 5
    assert report["summary"]["match"] == 2


def test_cli_alignment_only(text_files, tmp_path):
    original, revised = text_files
    out = tmp_path / "results"
    code = main(["-a", str(original), "-b", str(revised), "-o", str(out), "--no-jieba"])
    assert code == 0
    assert (out / "errata_report.json").exists()
    assert not (out / "word_errors.csv").exists()


def test_cli_missing_file(tmp_path):
    assert main(["-a", str(tmp_path / "nope.txt"), "-b", str(tmp_path / "nope.txt")]) == 1


def test_cli_rejects_invalid_options(text_files, tmp_path):
    original, revised = text_files
    code = main(
        ["-a", str(original), "-b", str(revised), "-o", str(tmp_path), "--no-jieba", "--window-size", "0"]
    )
    assert code == 1


def test_cli_similarity_mode(capsys):
    assert main(["--similarity", "--text1", "第三句。", "--text2", "第一句。"]) == 0
    assert "Similarity (jaccard) = 0.600000" in capsys.readouterr().out


def test_cli_similarity_requires_texts():
    assert main(["--similarity", "--text1", "甲"]) == 1


JIEBA_ORIGINAL = "今天天气很好。\n我们明天去看五伯。\n"
JIEBA_REVISED = "今天天气很好。\n我们明天去看五百。\n"


def test_build_errata_with_default_jieba_and_user_words():
    """默认 jieba 分词器加入自定义词后得到 五伯 → 五百"""
    result = build_errata(JIEBA_ORIGINAL, JIEBA_REVISED, user_words=["五伯", "五百"])
    assert result["statistics"].match == 2
    assert [row.key for row in result["word_errors"]] == [("五伯", "五百")]
    assert result["word_errors"][0].clause == "我们明天去看五伯"


def test_cli_user_words(tmp_path):
    original = tmp_path / "original.txt"
    revised = tmp_path / "revised.txt"
    original.write_text(JIEBA_ORIGINAL, encoding="utf-8")
    revised.write_text(JIEBA_REVISED, encoding="utf-8")
    out = tmp_path / "results"
    code = main(
        ["-a", str(original), "-b", str(revised), "-o", str(out), "--user-words", "五伯, 五百"]
    )
    assert code == 0
    rows = (out / "word_errors.csv").read_text(encoding="utf-8").splitlines()
    assert rows[1] == "五伯,五百,我们明天去看五伯,2,2"


def test_package_logger_does_not_propagate():
    """包日志只经自身 handler 输出一次，不再传给根 logger"""
    package_logger = logging.getLogger("errata_aligner")
    assert package_logger.propagate is False
    assert len(package_logger.handlers) == 1
