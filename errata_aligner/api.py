"""
API module for errata alignment.
Provides high-level interface for easy integration.
"""

from typing import Any, Dict, List, Optional
import logging
import os
import time

from .alignment import AlignmentItem, align_sentences, alignment_statistics
from .alignment.base import CancelCheck
from .config import AlignmentOptions, CollectorOptions
from .core.similarity import similarity
from .core.splitter import SentenceSplitter
from .core.tokenizer import JiebaTokenizer, Tokenizer
from .errata import collect_word_errors
from .output.formatter import OutputFormatter
from .utils import split_config


logger = logging.getLogger(__name__)


def align_texts(
    text_a: str,
    text_b: str,
    options: Optional[AlignmentOptions] = None,
    tokenizer: Optional[Tokenizer] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> List[AlignmentItem]:
    """Split two plain texts into sentences (with line numbers) and align them"""
    sentences_a = SentenceSplitter.split_sentences_with_line_numbers(text_a)
    sentences_b = SentenceSplitter.split_sentences_with_line_numbers(text_b)
    return align_sentences(
        sentences_a, sentences_b, options, tokenizer=tokenizer, should_cancel=should_cancel
    )


def build_errata(
    text_a: str,
    text_b: str,
    options: Optional[AlignmentOptions] = None,
    collector_options: Optional[CollectorOptions] = None,
    tokenizer: Optional[Tokenizer] = None,
    should_cancel: Optional[CancelCheck] = None,
    user_words: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Align two texts and collect the word errors of their matched sentences.

    A JiebaTokenizer is created when no tokenizer is given; ``user_words`` are
    added to its dictionary. Word errors follow the segmentation: a typo that
    jieba glues to a neighbouring character on one side only (五伯 + 家 against
    五百家) is a two-for-one token change and yields no replacement unless
    the words are pinned through ``user_words``.

    Returns:
        {"alignment": [...], "statistics": AlignmentStatistics, "word_errors": [...]}
    """
    options = (options or AlignmentOptions()).validate()
    collector_options = (collector_options or CollectorOptions()).validate()
    if tokenizer is None:
        tokenizer = JiebaTokenizer(user_words=user_words)

    items = align_texts(text_a, text_b, options, tokenizer, should_cancel)
    word_errors = collect_word_errors(
        items, tokenizer, collector_options, should_cancel=should_cancel
    )
    return {
        "alignment": items,
        "statistics": alignment_statistics(items),
        "word_errors": word_errors,
    }


def calculate_similarity(
    text1: str,
    text2: str,
    tokenizer: Optional[Tokenizer] = None,
    **option_overrides,
) -> float:
    """
    Convenience helper to compute the similarity between two texts.

    Keyword arguments override AlignmentOptions fields (camelCase accepted).
    """
    options = AlignmentOptions.from_dict(option_overrides)
    return similarity(text1, text2, options, tokenizer)


class ErrataAligner:
    """File-based wrapper: original/revised text files in, errata out.

    Public methods mirror a typical run: `run()`, `save_results(...)`,
    `print_report(...)`.
    """

    def __init__(
        self,
        original_path: str,
        revised_path: str,
        tokenizer: Optional[Tokenizer] = None,
        use_jieba: bool = True,
        user_words: Optional[List[str]] = None,
        **config,
    ):
        alignment_config, collector_config = split_config(config)
        self.options = AlignmentOptions.from_dict(alignment_config)
        self.collector_options = CollectorOptions.from_dict(collector_config)
        self.original_path = original_path
        self.revised_path = revised_path
        if tokenizer is None and use_jieba:
            tokenizer = JiebaTokenizer(user_words=user_words)
        self.tokenizer = tokenizer
        self.logger = logging.getLogger(__name__)
        self.start_time = time.time()

    @staticmethod
    def _read(path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def run(self, should_cancel: Optional[CancelCheck] = None) -> Dict[str, Any]:
        """Align both files; collect word errors when a tokenizer is available"""
        text_a = self._read(self.original_path)
        text_b = self._read(self.revised_path)

        items = align_texts(text_a, text_b, self.options, self.tokenizer, should_cancel)
        word_errors = None
        if self.tokenizer is not None:
            word_errors = collect_word_errors(
                items, self.tokenizer, self.collector_options, should_cancel
            )
        else:
            self.logger.info("No tokenizer available, skipping word error collection")

        report = OutputFormatter.build_report(
            items, word_errors, self.options, self.collector_options
        )
        report["files"] = {
            "original": os.path.abspath(self.original_path),
            "revised": os.path.abspath(self.revised_path),
        }
        report["processing_time_seconds"] = round(time.time() - self.start_time, 2)
        return {"items": items, "word_errors": word_errors, "report": report}

    def save_results(
        self,
        result: Dict[str, Any],
        output_dir: Optional[str] = None,
        csv_file: Optional[str] = None,
        json_file: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Save the JSON report and the word error CSV.

        Relative file names are resolved against output_dir (default: the
        current working directory); absolute paths are used as-is.

        Returns:
            result dict with an "io" key holding the absolute output paths
        """
        if output_dir is None:
            output_dir = os.getcwd()
        output_dir = os.path.normpath(os.path.abspath(output_dir))
        os.makedirs(output_dir, exist_ok=True)

        json_path = os.path.join(output_dir, json_file or "errata_report.json")
        OutputFormatter.save_report(result["report"], json_path)
        io_info = {"output_base": output_dir, "report_path": json_path}

        if result.get("word_errors") is not None:
            csv_path = os.path.join(output_dir, csv_file or "word_errors.csv")
            with open(csv_path, "w", encoding="utf-8", newline="") as f:
                f.write(OutputFormatter.format_word_errors_csv(result["word_errors"]))
            io_info["csv_path"] = csv_path

        result["io"] = io_info
        return result

    def print_report(self, result: Dict[str, Any]):
        self.logger.info(OutputFormatter.format_console(result["report"]))
        io_info = result.get("io")
        if io_info:
            self.logger.info(f"     Saved to: {io_info['output_base']}")
