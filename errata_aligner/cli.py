import argparse
import os
import logging
from .api import ErrataAligner, calculate_similarity
from .config import ConfigurationError
from .utils import build_options_from_args


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Proofreading errata aligner: sentence alignment and word error extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  errata-aligner --original draft.txt --revised proofread.txt --output results/
  errata-aligner -a draft.txt -b proofread.txt -o out/ --window-size 5 --threshold 0.5
  errata-aligner --similarity --text1 "他去了五伯家。" --text2 "他去了五百家。"
        """,
    )

    parser.add_argument("-a", "--original", required=False, help="Path to the original text")
    parser.add_argument("-b", "--revised", required=False, help="Path to the revised text")
    parser.add_argument(
        "-o", "--output", required=False, help="Output directory for results"
    )
    parser.add_argument(
        "--csv", type=str, help="File name of the word error CSV (default: word_errors.csv)"
    )
    parser.add_argument(
        "--json", type=str, help="File name of the JSON report (default: errata_report.json)"
    )

    # Similarity test mode (lightweight utility)
    parser.add_argument(
        "--similarity",
        action="store_true",
        help="Run a one-off similarity check between two text snippets",
    )
    parser.add_argument("--text1", type=str, help="First text for similarity test")
    parser.add_argument("--text2", type=str, help="Second text for similarity test")

    group = parser.add_argument_group("alignment options")
    group.add_argument("--window-size", type=int, help="Search radius in sentences (default: 10)")
    group.add_argument(
        "--threshold", type=float, help="Sentence similarity threshold (default: 0.6)"
    )
    group.add_argument("--ngram-size", type=int, help="N-gram size (default: 1)")
    group.add_argument(
        "--granularity", choices=["char", "word"], help="N-gram unit (default: char)"
    )
    group.add_argument(
        "--cut-mode", choices=["default", "search"], help="Tokenizer mode (default: default)"
    )
    group.add_argument(
        "--offset", type=int, help="Extra forward reach of the search window (default: 1)"
    )
    group.add_argument(
        "--max-window-expansion", type=int, help="Window expansion steps (default: 3)"
    )
    group.add_argument(
        "--consecutive-fail-threshold",
        type=int,
        help="Failed searches before giving up on a sentence (default: 3)",
    )
    group.add_argument(
        "--keep-inner-whitespace",
        action="store_true",
        help="Do not remove whitespace inside sentences before scoring",
    )

    group = parser.add_argument_group("word error options")
    group.add_argument(
        "--clause-threshold", type=float, help="Clause similarity threshold (default: 0.4)"
    )
    group.add_argument(
        "--delimiters", type=str, help="Clause delimiter characters (default: ，；。？！)"
    )
    group.add_argument(
        "--char-clause-similarity",
        action="store_true",
        help="Score clauses with character bigrams instead of words",
    )
    group.add_argument(
        "--no-jieba",
        action="store_true",
        help="Run without a tokenizer (alignment only, no word errors)",
    )
    group.add_argument(
        "--user-words",
        type=str,
        help="Comma-separated words added to the jieba dictionary (e.g. 五伯,五百)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output (show debug information)",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    config = build_options_from_args(args)

    if args.similarity:
        if not args.text1 or not args.text2:
            logging.error(
                "Error: --text1 and --text2 are required when using --similarity"
            )
            return 1
        alignment_keys = {
            k: v
            for k, v in config.items()
            if k not in ("clause_similarity_threshold", "delimiters", "use_word_similarity")
        }
        try:
            sim = calculate_similarity(args.text1, args.text2, **alignment_keys)
        except ConfigurationError as e:
            logging.error(f"Error: {e}")
            return 1
        print(f"Similarity (jaccard) = {sim:.6f}")
        return 0

    if not args.original or not os.path.exists(args.original):
        logging.error(
            f"Error: Original file '{args.original}' does not exist or not provided"
        )
        return 1

    if not args.revised or not os.path.exists(args.revised):
        logging.error(
            f"Error: Revised file '{args.revised}' does not exist or not provided"
        )
        return 1

    output_dir = args.output or os.getcwd()

    try:
        user_words = [w.strip() for w in (args.user_words or "").split(",") if w.strip()]
        aligner = ErrataAligner(
            args.original,
            args.revised,
            use_jieba=not args.no_jieba,
            user_words=user_words,
            **config,
        )
        result = aligner.run()
        result = aligner.save_results(
            result, output_dir, csv_file=args.csv, json_file=args.json
        )
        aligner.print_report(result)
        io_info = result["io"]
        logging.info(f"Report written: {io_info['report_path']}")
        if "csv_path" in io_info:
            logging.info(f"Word errors written: {io_info['csv_path']}")
        return 0
    except ConfigurationError as e:
        logging.error(f"Error: {e}")
        return 1
    except OSError as e:
        logging.error(f"Error reading or writing files: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
