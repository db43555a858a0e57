"""Command line entry point: ``python -m rstgen``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rstgen.convert import convert_file
from rstgen.exceptions import RstgenError
from rstgen.generator import OutputTarget
from rstgen.merge import merge_indexes
from rstgen.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rstgen", description="Render reStructuredText and merge index files."
    )
    parser.add_argument("--log-level", help="Logging level (default: $RSTGEN_LOG_LEVEL)")
    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Render an rst file to HTML or LaTeX")
    render.add_argument("file", type=Path, help="Source rst file")
    render.add_argument("--latex", action="store_true", help="Emit LaTeX instead of HTML")
    render.add_argument("--index", action="store_true", help="Also write a .idx index file")
    render.add_argument("--out-dir", type=Path, help="Output directory (default: next to FILE)")

    merge = commands.add_parser("merge", help="Merge the .idx files of a directory")
    merge.add_argument("directory", type=Path, help="Directory holding .idx files")
    merge.add_argument("--output", type=Path, help="Write the merged HTML here instead of stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == "render":
            result = convert_file(
                args.file,
                target=OutputTarget.LATEX if args.latex else OutputTarget.HTML,
                out_dir=args.out_dir,
                write_index=args.index,
            )
            print(result.output_path)
            if result.index_path is not None:
                print(result.index_path)
            return 0

        if not args.directory.is_dir():
            logger.error("Not a directory: %s", args.directory)
            return 2
        merged = merge_indexes(args.directory)
        if args.output is not None:
            args.output.write_text(merged, encoding="utf-8")
            print(args.output)
        else:
            sys.stdout.write(merged)
        return 0
    except (RstgenError, OSError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
