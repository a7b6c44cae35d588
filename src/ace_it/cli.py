"""Build time pass: expand the `# ACE-It` marked tagged unions of a module.

Usage:
    ace-it module.py                  # expanded module on stdout
    ace-it module.py -o generated.py
    ace-it module.py --check          # only validate
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional
from typing import Sequence

from ace_it._version import version
from ace_it.source import expand_source

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ace-it",
        description="Generate conversions for the tagged unions marked with '# ACE-It' in a Python module",
    )
    parser.add_argument("source", type=Path, help="Python module to expand")
    parser.add_argument("-o", "--output", type=Path, help="Write the expanded module here instead of stdout")
    parser.add_argument(
        "--check", action="store_true", help="Only check that the module expands, do not write anything"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log expansion progress")
    parser.add_argument("--version", action="version", version=f"%(prog)s {version}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source = args.source.read_text(encoding="utf-8")
    try:
        expanded = expand_source(source, str(args.source))
    except SyntaxError as e:
        # Duplicate payload types and malformed declarations are both located SyntaxErrors, as is unparsable input
        logger.error("%s:%s:%s: %s", e.filename, e.lineno, e.offset, e.msg)
        return 1

    if args.check:
        logger.info("%s expands cleanly", args.source)
    elif args.output is not None:
        args.output.write_text(expanded, encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(expanded)
    return 0
