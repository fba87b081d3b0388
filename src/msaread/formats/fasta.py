"""
FASTA alignment parsing.

Handles single-line and multi-line sequences:

    >sequence_identifier optional description
    ACGTACGTACGT
    ACGT
    >another_sequence
    TGCATGCATGCA

The identifier is the first whitespace-delimited token after '>'; the rest of
the header is ignored. Blank lines are skipped anywhere in the file.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .errors import FastaError, FastaErrorKind
from .models import Alignment, Sequence

logger = logging.getLogger(__name__)

# Files above this size are read into memory once instead of line by line
LARGE_FILE_THRESHOLD = 1_000_000


def parse_fasta_lines(lines: Iterable[str]) -> Alignment:
    """Parse FASTA content from an iterable of lines.

    Args:
        lines: Lines of text (trailing newlines are allowed)

    Returns:
        Alignment containing all sequences, in file order

    Raises:
        FastaError: On an empty header, data before the first header,
            non-ASCII sequence data, or when no sequence was found
    """
    pairs: List[Tuple[str, bytes]] = []
    current_id: Optional[str] = None
    current_parts: List[str] = []

    def flush() -> None:
        if current_id is not None and current_parts:
            pairs.append((current_id, "".join(current_parts).encode("ascii")))

    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue

        if line.startswith(">"):
            flush()
            header = line[1:].split(None, 1)
            current_id = header[0] if header else ""
            current_parts = []
            if not current_id:
                raise FastaError(
                    FastaErrorKind.INVALID_FORMAT,
                    "Empty sequence identifier",
                    line=line_number,
                )
            continue

        if current_id is None:
            raise FastaError(FastaErrorKind.SEQUENCE_WITHOUT_HEADER, line=line_number)
        if not line.isascii():
            raise FastaError(
                FastaErrorKind.INVALID_FORMAT,
                f"Non-ASCII character in sequence '{current_id}'",
                line=line_number,
            )
        # Drop internal whitespace
        if " " in line or "\t" in line:
            line = "".join(line.split())
        current_parts.append(line)

    flush()

    if not pairs:
        raise FastaError(FastaErrorKind.EMPTY_FILE)

    logger.debug("Parsed %d FASTA sequences", len(pairs))
    return Alignment(Sequence(name, data) for name, data in pairs)


def parse_fasta_str(content: str) -> Alignment:
    """Parse FASTA content held in memory."""
    return parse_fasta_lines(content.splitlines())


def parse_fasta_file(
    filepath: Union[str, Path],
    in_memory_threshold: int = LARGE_FILE_THRESHOLD,
) -> Alignment:
    """Parse a FASTA file.

    Files larger than `in_memory_threshold` bytes are read into memory in one
    call and parsed from the string; smaller files are streamed line by line.

    Args:
        filepath: Path to the FASTA file
        in_memory_threshold: Size in bytes above which the file is slurped

    Returns:
        Parsed Alignment

    Raises:
        FastaError: IO_ERROR if the file cannot be read, otherwise as
            parse_fasta_lines
    """
    path = Path(filepath)
    try:
        size = path.stat().st_size
        if size > in_memory_threshold:
            logger.debug("Reading %s (%d bytes) into memory", path, size)
            content = path.read_text(encoding="utf-8-sig", errors="replace")
            return parse_fasta_str(content)
        with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
            return parse_fasta_lines(f)
    except OSError as e:
        raise FastaError(FastaErrorKind.IO_ERROR, f"{path}: {e.strerror or e}") from e
