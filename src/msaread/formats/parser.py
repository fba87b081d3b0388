"""
Format detection and dispatch for alignment files.

Detection priority:
1. Explicit format (-f/--format); no fallback
2. File extension; a parser failure falls through
3. Content sniffing of the first non-blank line; a parser failure is final
4. Every parser in turn (FASTA, NEXUS, PHYLIP); first success wins

The file is read into memory once and shared by every attempt.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union

from Bio import AlignIO

from .errors import EmptyFileError, FileReadError, ParseError, UnknownFormatError
from .fasta import parse_fasta_str
from .models import Alignment, FileFormat
from .nexus import parse_nexus_str
from .phylip import parse_phylip_str

logger = logging.getLogger(__name__)

EXTENSIONS: Dict[str, FileFormat] = {
    "fa": FileFormat.FASTA,
    "fas": FileFormat.FASTA,
    "fasta": FileFormat.FASTA,
    "fna": FileFormat.FASTA,
    "faa": FileFormat.FASTA,
    "ffn": FileFormat.FASTA,
    "frn": FileFormat.FASTA,
    "nex": FileFormat.NEXUS,
    "nexus": FileFormat.NEXUS,
    "nxs": FileFormat.NEXUS,
    "phy": FileFormat.PHYLIP,
    "phylip": FileFormat.PHYLIP,
    "ph": FileFormat.PHYLIP,
}

PARSERS: Dict[FileFormat, Callable[[str], Alignment]] = {
    FileFormat.FASTA: parse_fasta_str,
    FileFormat.NEXUS: parse_nexus_str,
    FileFormat.PHYLIP: parse_phylip_str,
}

# Order for the exhaustive last-resort trial
FALLBACK_ORDER: Tuple[FileFormat, ...] = (FileFormat.FASTA, FileFormat.NEXUS, FileFormat.PHYLIP)

# Biopython writer names for export
BIOPYTHON_FORMATS: Dict[FileFormat, str] = {
    FileFormat.FASTA: "fasta",
    FileFormat.PHYLIP: "phylip-relaxed",
    FileFormat.NEXUS: "nexus",
}

_UNSIGNED_INT = re.compile(r"[0-9]+")


def detect_from_extension(filepath: Union[str, Path]) -> Optional[FileFormat]:
    """Detect the format from the file extension (case-insensitive).

    Returns:
        Detected FileFormat, or None for unknown extensions
    """
    suffix = Path(filepath).suffix
    return EXTENSIONS.get(suffix[1:].lower()) if suffix else None


def detect_from_content(content: str) -> Optional[FileFormat]:
    """Detect the format from the first non-blank line only.

    '#NEXUS' (any case) is NEXUS, '>' is FASTA, and a line whose first two
    tokens are non-negative integers is PHYLIP. Anything else is None; later
    lines are never consulted.
    """
    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue

        if trimmed.upper().startswith("#NEXUS"):
            return FileFormat.NEXUS
        if trimmed.startswith(">"):
            return FileFormat.FASTA

        parts = trimmed.split()
        if (
            len(parts) >= 2
            and _UNSIGNED_INT.fullmatch(parts[0])
            and _UNSIGNED_INT.fullmatch(parts[1])
        ):
            return FileFormat.PHYLIP
        return None

    return None


@dataclass(frozen=True)
class DetectionStrategy:
    """One step of the detection chain.

    Attributes:
        name: Label used in log messages
        detect: Callable (path, content) -> detected format or None
        final: If True, a parser failure for the detected format is raised
            immediately instead of falling through to the next step
    """
    name: str
    detect: Callable[[Optional[Path], str], Optional[FileFormat]]
    final: bool


DETECTION_STRATEGIES: Tuple[DetectionStrategy, ...] = (
    DetectionStrategy(
        "extension",
        lambda path, content: detect_from_extension(path) if path is not None else None,
        final=False,
    ),
    DetectionStrategy(
        "content",
        lambda path, content: detect_from_content(content),
        final=True,
    ),
)


def parse_content(content: str, format: FileFormat) -> Alignment:
    """Parse in-memory content with one specific parser."""
    return PARSERS[format](content)


def _resolve(
    content: str,
    path: Optional[Path],
    forced_format: Optional[FileFormat],
) -> Tuple[Alignment, FileFormat]:
    if forced_format is not None:
        logger.debug("Parsing as %s (forced)", forced_format)
        return parse_content(content, forced_format), forced_format

    for strategy in DETECTION_STRATEGIES:
        format = strategy.detect(path, content)
        if format is None:
            continue
        logger.debug("Trying %s (detected from %s)", format, strategy.name)
        try:
            return parse_content(content, format), format
        except ParseError as e:
            if strategy.final:
                raise
            logger.debug("%s parse failed: %s", format, e)

    for format in FALLBACK_ORDER:
        try:
            alignment = parse_content(content, format)
        except ParseError as e:
            logger.debug("%s parse failed: %s", format, e)
            continue
        logger.debug("Parsed as %s (exhaustive trial)", format)
        return alignment, format

    raise UnknownFormatError()


def _read_content(path: Path) -> str:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e)) from e
    if not raw:
        raise EmptyFileError()
    return raw.decode("utf-8-sig", errors="replace")


def parse_file_with_format(
    filepath: Union[str, Path],
    forced_format: Optional[FileFormat] = None,
) -> Tuple[Alignment, FileFormat]:
    """Parse an alignment file and report which format was used.

    Args:
        filepath: Path to the alignment file
        forced_format: Skip detection and use this parser only

    Returns:
        Tuple of (alignment, format)

    Raises:
        EmptyFileError: For a zero-byte file (no parser is run)
        FileReadError: If the file cannot be read
        UnknownFormatError: If no parser accepts the content
        ParseError: The parser's own error for forced or content-detected
            formats
    """
    path = Path(filepath)
    content = _read_content(path)
    return _resolve(content, path, forced_format)


def parse_file_with_options(
    filepath: Union[str, Path],
    forced_format: Optional[FileFormat] = None,
) -> Alignment:
    """Parse an alignment file with an optional forced format."""
    alignment, _ = parse_file_with_format(filepath, forced_format)
    return alignment


def parse_file(filepath: Union[str, Path]) -> Alignment:
    """Parse an alignment file, detecting its format."""
    return parse_file_with_options(filepath, None)


def parse_file_as(filepath: Union[str, Path], format: FileFormat) -> Alignment:
    """Parse an alignment file with an explicit format."""
    return parse_file_with_options(filepath, format)


def parse_string(content: str, forced_format: Optional[FileFormat] = None) -> Alignment:
    """Parse in-memory content using the detection policy (no extension step).

    Raises:
        EmptyFileError: For empty content
    """
    if not content:
        raise EmptyFileError()
    alignment, _ = _resolve(content, None, forced_format)
    return alignment


def write_alignment(
    alignment: Alignment,
    filepath: Union[str, Path],
    format: FileFormat = FileFormat.FASTA,
) -> None:
    """Write an alignment to file with Biopython.

    PHYLIP output uses the relaxed layout so long names survive.

    Raises:
        ValueError: If the sequences do not all have the same length
    """
    msa = alignment.to_biopython()
    with open(filepath, "w") as f:
        AlignIO.write(msa, f, BIOPYTHON_FORMATS[format])
    logger.debug("Wrote %d sequences to %s as %s", len(alignment), filepath, format)
