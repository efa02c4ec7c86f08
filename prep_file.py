"""
prep_file.py
------------
Clean a text file line by line with the same pipeline as the HTTP API.

Every input line produces exactly one output line (UTF-8). Bytes that do not
decode are replaced, never fatal.

Usage:
    python prep_file.py tweets.txt tweets.clean.txt --urls tag --mentions remove
    python prep_file.py weibo.txt weibo.clean.txt --encoding gb18030 --no-lower
    python prep_file.py in.txt out.txt --emojis demojize --filter rt --filter via

Defaults come from the PREP_* environment variables (see config/settings.py).
"""

import argparse
import time

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from config.settings import settings
from middleware.input_validator import InputValidationError, validate_actions, validate_options
from models.token import ACTION_ARGUMENTS, ALLOWED_ACTIONS
from services.text_parser import prep_file


def _options(args) -> dict:
    options = {
        "to_lower": args.to_lower,
        "strip_accents": args.strip_accents,
        "reduce_len": args.reduce_len,
        "remove_unencodable_char": args.remove_unencodable,
    }
    if args.encoding:
        options["encoding"] = args.encoding
    if args.filters:
        options["filters"] = args.filters
    return options


def main(args, parser) -> None:
    actions = {name: getattr(args, name) for name in ACTION_ARGUMENTS}
    try:
        action_kwargs = validate_actions(actions)
        option_kwargs = validate_options(_options(args))
    except InputValidationError as e:
        parser.error(str(e))

    t_start = time.perf_counter()
    lines = prep_file(args.infile, args.outfile, **option_kwargs, **action_kwargs)
    print(f"[prep_file] {lines} lines → {args.outfile} "
          f"({(time.perf_counter() - t_start):.2f}s)")


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tokenize and clean a file of tweets, one tweet per line."
    )
    parser.add_argument("infile", help="Path to the raw input file")
    parser.add_argument("outfile", help="Path to write the cleaned lines to (UTF-8)")

    parser.add_argument(
        "--encoding", default=settings.PREP_ENCODING or None,
        help="Encoding of the input file (default: utf-8)",
    )
    parser.add_argument(
        "--remove-unencodable", action="store_true",
        default=settings.PREP_REMOVE_UNENCODABLE,
        help="Drop replacement characters instead of keeping one per run",
    )
    parser.add_argument(
        "--no-lower", dest="to_lower", action="store_false",
        default=settings.PREP_TO_LOWER,
        help="Keep the original letter case",
    )
    parser.add_argument(
        "--strip-accents", action="store_true", default=settings.PREP_STRIP_ACCENTS,
        help="Remove accents (é → e)",
    )
    parser.add_argument(
        "--reduce-len", action="store_true", default=settings.PREP_REDUCE_LEN,
        help="Cap runs of the same character at three (waaaay → waaay)",
    )
    parser.add_argument(
        "--filter", dest="filters", action="append", default=[], metavar="WORD",
        help="Drop tokens equal to WORD (repeatable)",
    )

    # One option per category: --mentions, --hashtags, ..., --html-tags
    for name, category in ACTION_ARGUMENTS.items():
        parser.add_argument(
            f"--{name.replace('_', '-')}", dest=name, default=None,
            choices=ALLOWED_ACTIONS[category],
            help=f"What to do with {name.replace('_', ' ')} (default: keep)",
        )
    return parser


if __name__ == "__main__":
    parser = build_parser()
    args = parser.parse_args()
    main(args, parser)
