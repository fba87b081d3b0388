"""
msaread: multi-format sequence alignment reader

Detects and parses FASTA, PHYLIP, and NEXUS alignment files into a single
normalized, self-validating Alignment structure for downstream tools.
"""

__version__ = "0.3.0"

from msaread.formats import (
    Alignment,
    FileFormat,
    ParseError,
    Sequence,
    SequenceType,
    parse_file,
    parse_file_as,
    parse_file_with_options,
    parse_string,
)
from msaread.logging import setup_logging, get_logger

__all__ = [
    "Alignment",
    "FileFormat",
    "ParseError",
    "Sequence",
    "SequenceType",
    "parse_file",
    "parse_file_as",
    "parse_file_with_options",
    "parse_string",
    "setup_logging",
    "get_logger",
    "__version__",
]
