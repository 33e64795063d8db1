"""Output formatting"""

from .formatter import (
    CSV_HEADER,
    OutputFormatter,
    build_report,
    format_word_errors_csv,
    parse_word_errors_csv,
    save_report,
    similarity_summary,
)

__all__ = [
    "CSV_HEADER",
    "OutputFormatter",
    "build_report",
    "format_word_errors_csv",
    "parse_word_errors_csv",
    "save_report",
    "similarity_summary",
]
