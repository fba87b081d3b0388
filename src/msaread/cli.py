"""
msaread Command-Line Interface

Entry point for the msaread command: parse an alignment file in any
supported format, report what was found, and optionally write per-sequence
statistics or convert the alignment to another format.
"""

import argparse
import sys
from pathlib import Path

from msaread import __version__
from msaread.config import get_config
from msaread.formats import (
    FileFormat,
    ParseError,
    parse_file_with_format,
    sequence_table,
    write_alignment,
)
from msaread.logging import setup_logging

FORMAT_CHOICES = [f.value for f in FileFormat]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="msaread",
        description="Read FASTA, PHYLIP, or NEXUS alignments and report their contents.",
    )
    parser.add_argument("file", type=Path, help="Alignment file to read")
    parser.add_argument(
        "-f", "--format",
        choices=FORMAT_CHOICES,
        help="Input format (default: detect from extension and content)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Write a per-sequence statistics table (TSV) to stdout",
    )
    parser.add_argument(
        "--convert",
        choices=FORMAT_CHOICES,
        help="Output format for -o/--output (default: fasta)",
    )
    parser.add_argument("-o", "--output", type=Path, help="Write the alignment to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    parser.add_argument("--log-file", type=Path, help="Also write log messages to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    """Entry point for the msaread command."""
    args = build_parser().parse_args(argv)
    config = get_config()
    if args.log_file:
        config.log_file = args.log_file
    if args.verbose:
        config.verbose = True

    logger = setup_logging("msaread", verbose=config.verbose)

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        sys.exit(2)

    if config.log_file:
        logger = setup_logging("msaread", log_file=config.log_file, verbose=config.verbose)

    forced = FileFormat.from_name(args.format) if args.format else config.default_format

    try:
        alignment, detected = parse_file_with_format(args.file, forced)
    except ParseError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"File:      {args.file}")
    logger.info(f"Format:    {detected}")
    logger.info(f"Sequences: {alignment.sequence_count}")
    logger.info(f"Length:    {alignment.alignment_length}")
    logger.info(
        f"Type:      {alignment.sequence_type.label} "
        f"(nt ratio {alignment.sequence_type.nt_ratio:.2f})"
    )
    if not alignment.is_valid_alignment:
        logger.warning(alignment.warning)

    if args.stats:
        sequence_table(alignment).to_csv(sys.stdout, sep="\t", index=False)

    if args.output:
        out_format = FileFormat.from_name(args.convert) if args.convert else config.export_format
        try:
            write_alignment(alignment, args.output, out_format)
        except ValueError as e:
            logger.error(f"Cannot write {args.output}: {e}")
            sys.exit(1)
        logger.info(f"Wrote {args.output} ({out_format})")

    sys.exit(0)


if __name__ == "__main__":
    main()
