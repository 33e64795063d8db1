"""Unified output formatting for alignment results and word error lists"""

from typing import Any, Dict, Iterable, List, Optional
from pathlib import Path
import csv
import io
import json

import numpy as np

from ..alignment.base import AlignmentItem, AlignmentType
from ..alignment.statistics import alignment_statistics
from ..config import AlignmentOptions, CollectorOptions
from ..errata.models import WordReplacement


CSV_HEADER = ["错误词语", "正确词语", "错误词语所在小句", "错词长度", "正词长度"]

PERCENTILES = (1, 5, 10, 25, 50, 75)


class OutputFormatter:
    """Formats alignment results into CSV, report dicts and console output"""

    @staticmethod
    def format_word_errors_csv(rows: Iterable[WordReplacement]) -> str:
        """Encode word errors as CSV text (header first, rows joined by LF)

        Minimal quoting: only fields containing a comma, a double quote or a
        line break are quoted, with inner quotes doubled.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for row in rows:
            writer.writerow(
                [row.wrong, row.correct, row.clause, len(row.wrong), len(row.correct)]
            )
        # No newline after the last row
        return buffer.getvalue()[:-1]

    @staticmethod
    def parse_word_errors_csv(text: str) -> List[WordReplacement]:
        """Read back the output of format_word_errors_csv"""
        reader = csv.reader(io.StringIO(text))
        rows = []
        for i, record in enumerate(reader):
            if i == 0 and record == CSV_HEADER:
                continue
            if not record:
                continue
            if len(record) < 3:
                raise ValueError(f"Malformed word error row {i}: {record!r}")
            rows.append(WordReplacement(record[0], record[1], record[2]))
        return rows

    @staticmethod
    def similarity_summary(items: Iterable[AlignmentItem]) -> Dict[str, Any]:
        """Distribution of MATCH similarities

        Returns:
            Dict with count, mean, stdev, min, max and percentiles
        """
        sims = np.array(
            [
                item.similarity
                for item in items
                if item.type == AlignmentType.MATCH and item.similarity is not None
            ],
            dtype=float,
        )
        if sims.size == 0:
            return {
                "count": 0,
                "mean": 0.0,
                "stdev": 0.0,
                "min": 0.0,
                "max": 0.0,
                "percentiles": {f"p{p}": 0.0 for p in PERCENTILES},
            }

        return {
            "count": int(sims.size),
            "mean": round(float(np.mean(sims)), 4),
            "stdev": round(float(np.std(sims, ddof=1)) if sims.size > 1 else 0.0, 4),
            "min": round(float(np.min(sims)), 4),
            "max": round(float(np.max(sims)), 4),
            "percentiles": {
                f"p{p}": round(float(np.percentile(sims, p)), 4) for p in PERCENTILES
            },
        }

    @staticmethod
    def build_report(
        items: List[AlignmentItem],
        word_errors: Optional[List[WordReplacement]] = None,
        options: Optional[AlignmentOptions] = None,
        collector_options: Optional[CollectorOptions] = None,
    ) -> Dict[str, Any]:
        """Build a JSON-ready report of one run"""
        report: Dict[str, Any] = {
            "summary": alignment_statistics(items).to_dict(),
            "similarity": OutputFormatter.similarity_summary(items),
            "options": {
                "alignment": (options or AlignmentOptions()).to_dict(),
            },
            "alignment": [item.to_dict() for item in items],
        }
        if word_errors is not None:
            report["options"]["collector"] = (
                collector_options or CollectorOptions()
            ).to_dict()
            report["word_errors"] = [row.to_dict() for row in word_errors]
        return report

    @staticmethod
    def save_report(report: Dict[str, Any], path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, ensure_ascii=False, indent=2)
        return path

    @staticmethod
    def format_console(report: Dict[str, Any]) -> str:
        """Compact console summary of a report"""
        summary = report.get("summary", {})
        sim = report.get("similarity", {})
        lines = [
            f"[OK] Aligned {summary.get('total', 0)} items: "
            f"match x{summary.get('match', 0)} / delete x{summary.get('delete', 0)} / "
            f"insert x{summary.get('insert', 0)} / moved x{summary.get('moveout', 0)}",
            f"     Similarity: mean={sim.get('mean', 0):.4f}, "
            f"range={sim.get('min', 0):.4f}~{sim.get('max', 0):.4f}",
        ]
        if "word_errors" in report:
            lines.append(f"     Word errors: {len(report['word_errors'])}")
        return "\n".join(lines)


format_word_errors_csv = OutputFormatter.format_word_errors_csv
parse_word_errors_csv = OutputFormatter.parse_word_errors_csv
similarity_summary = OutputFormatter.similarity_summary
build_report = OutputFormatter.build_report
save_report = OutputFormatter.save_report
