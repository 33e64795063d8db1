"""
Option records for the aligner and the word-error collector.

Both records are plain dataclasses built once by the caller (commonly from
user-facing settings through ``from_dict``) and passed whole into each run.
Out-of-range values are rejected, never clamped: ``validate()`` reports every
violation at once through a single ``ConfigurationError``.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, List, Optional
import re


DEFAULT_CLAUSE_DELIMITERS = ["，", "；", "。", "？", "！"]


class ConfigurationError(ValueError):
    """Raised before any alignment work when options are out of range"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid options: " + "; ".join(self.errors))


def parse_delimiters(config_str: Optional[str]) -> List[str]:
    """Parse a settings string such as "，；" into a delimiter list"""
    if not config_str or not config_str.strip():
        return list(DEFAULT_CLAUSE_DELIMITERS)
    return list(config_str.strip())


def snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _from_mapping(cls, data: Optional[Dict[str, Any]]):
    """Build a dataclass from camelCase or snake_case keys, dropping None values"""
    known = {f.name for f in fields(cls)}
    kwargs = {}
    unknown = []
    for key, value in (data or {}).items():
        if value is None:
            continue
        name = snake_case(key)
        if name not in known:
            unknown.append(key)
            continue
        kwargs[name] = value
    if unknown:
        raise ConfigurationError([f"unknown option '{k}'" for k in unknown])
    options = cls(**kwargs)
    options.validate()
    return options


def _check_int(errors: List[str], name: str, value, minimum: int):
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(f"{name} must be an integer, got {value!r}")
    elif value < minimum:
        errors.append(f"{name} must be >= {minimum}, got {value}")


def _check_ratio(errors: List[str], name: str, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(f"{name} must be a number, got {value!r}")
    elif not 0.0 <= value <= 1.0:
        errors.append(f"{name} must be within [0, 1], got {value}")


@dataclass
class AlignmentOptions:
    """Options of the anchor/window sentence aligner"""

    window_size: int = 10  # search radius around the anchor, in sentences
    similarity_threshold: float = 0.6  # minimum score to accept a match
    ngram_size: int = 1
    ngram_granularity: str = "char"  # "char" or "word" (word needs a tokenizer)
    cut_mode: str = "default"  # tokenizer mode for word granularity
    offset: int = 1  # extra forward reach of the search window
    max_window_expansion: int = 3
    consecutive_fail_threshold: int = 3
    remove_inner_whitespace: bool = True
    remove_punctuation: bool = False
    remove_digits: bool = False
    remove_latin: bool = False
    remove_footnote_markers: bool = False

    def validate(self) -> "AlignmentOptions":
        errors: List[str] = []
        _check_int(errors, "window_size", self.window_size, 1)
        _check_ratio(errors, "similarity_threshold", self.similarity_threshold)
        _check_int(errors, "ngram_size", self.ngram_size, 1)
        _check_int(errors, "offset", self.offset, 0)
        _check_int(errors, "max_window_expansion", self.max_window_expansion, 0)
        _check_int(
            errors, "consecutive_fail_threshold", self.consecutive_fail_threshold, 1
        )
        if self.ngram_granularity not in ("char", "word"):
            errors.append(
                f"ngram_granularity must be 'char' or 'word', got {self.ngram_granularity!r}"
            )
        if self.cut_mode not in ("default", "search"):
            errors.append(
                f"cut_mode must be 'default' or 'search', got {self.cut_mode!r}"
            )
        if errors:
            raise ConfigurationError(errors)
        return self

    @property
    def max_search_radius(self) -> int:
        """Largest radius the window may grow to while looking for one sentence"""
        return self.window_size * (1 + self.max_window_expansion)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AlignmentOptions":
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CollectorOptions:
    """Options of the clause-level word error collector"""

    delimiters: List[str] = field(
        default_factory=lambda: list(DEFAULT_CLAUSE_DELIMITERS)
    )
    clause_similarity_threshold: float = 0.4
    use_word_similarity: bool = True
    cut_mode: str = "default"

    def validate(self) -> "CollectorOptions":
        errors: List[str] = []
        _check_ratio(
            errors, "clause_similarity_threshold", self.clause_similarity_threshold
        )
        if not self.delimiters or any(
            not isinstance(d, str) or len(d) != 1 for d in self.delimiters
        ):
            errors.append("delimiters must be a non-empty list of single characters")
        if self.cut_mode not in ("default", "search"):
            errors.append(
                f"cut_mode must be 'default' or 'search', got {self.cut_mode!r}"
            )
        if errors:
            raise ConfigurationError(errors)
        return self

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CollectorOptions":
        data = dict(data or {})
        if isinstance(data.get("delimiters"), str):
            data["delimiters"] = parse_delimiters(data["delimiters"])
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
