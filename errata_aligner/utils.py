"""
Utility functions for the errata aligner.
"""

from dataclasses import fields
from typing import Any, Dict, Tuple

from .config import AlignmentOptions, CollectorOptions, snake_case


def split_config(config: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split a flat settings dict into (alignment, collector) option dicts.

    Keys may be camelCase or snake_case; ``cut_mode`` feeds both records.
    Unknown keys stay in the alignment dict so that validation reports them.
    """
    alignment_keys = {f.name for f in fields(AlignmentOptions)}
    collector_keys = {f.name for f in fields(CollectorOptions)}
    alignment, collector = {}, {}
    for key, value in (config or {}).items():
        name = snake_case(key)
        if name in collector_keys:
            collector[name] = value
        if name in alignment_keys or name not in collector_keys:
            alignment[name] = value
    return alignment, collector


def build_options_from_args(args) -> Dict[str, Any]:
    """Build the flat settings dict from an argparse Namespace.

    Returns: config dict without the options left unset on the command line
    """
    config = {
        "window_size": getattr(args, "window_size", None),
        "similarity_threshold": getattr(args, "threshold", None),
        "ngram_size": getattr(args, "ngram_size", None),
        "ngram_granularity": getattr(args, "granularity", None),
        "cut_mode": getattr(args, "cut_mode", None),
        "offset": getattr(args, "offset", None),
        "max_window_expansion": getattr(args, "max_window_expansion", None),
        "consecutive_fail_threshold": getattr(args, "consecutive_fail_threshold", None),
        "clause_similarity_threshold": getattr(args, "clause_threshold", None),
        "delimiters": getattr(args, "delimiters", None),
    }
    if getattr(args, "keep_inner_whitespace", False):
        config["remove_inner_whitespace"] = False
    if getattr(args, "char_clause_similarity", False):
        config["use_word_similarity"] = False

    # Remove None values to avoid overriding defaults
    return {k: v for k, v in config.items() if v is not None}
