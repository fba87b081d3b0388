"""
Error taxonomy for alignment parsing.

Every parser failure is a subclass of ParseError. Each parser has its own
closed set of failure kinds, carried on the exception as a `kind` enum so
callers can branch on the exact failure without string matching. Some kinds
are reserved for strict checking and are not raised by the lenient parsers.
"""

from enum import Enum
from typing import Optional


FORMAT_HINT = (
    "Hint: Use -f/--format to specify the format explicitly:\n"
    "  msaread -f fasta <file>   # FASTA format\n"
    "  msaread -f nexus <file>   # NEXUS format\n"
    "  msaread -f phylip <file>  # PHYLIP format"
)


class ParseError(Exception):
    """Base exception for all alignment parsing failures."""

    def __init__(self, message: str = "Failed to parse alignment") -> None:
        self.message = message
        super().__init__(self.message)


class EmptyFileError(ParseError):
    """Raised when the input file has no content at all."""

    def __init__(self, message: str = "Empty file") -> None:
        super().__init__(message)


class FileReadError(ParseError):
    """Raised when the input cannot be read; chained to the OSError."""

    def __init__(self, path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to open file: {path}: {reason}")


class UnknownFormatError(ParseError):
    """Raised when no parser accepts the input."""

    def __init__(self) -> None:
        super().__init__(f"Could not determine file format.\n{FORMAT_HINT}")


class AmbiguousFormatError(ParseError):
    """Raised when the input could plausibly be more than one format."""

    def __init__(self, possible: str, suggestion: str) -> None:
        self.possible = possible
        self.suggestion = suggestion
        super().__init__(
            f"Ambiguous file format (could be {possible}).\n"
            "Hint: Use -f/--format to specify the format explicitly:\n"
            f"  msaread -f {suggestion} <file>"
        )


class FastaErrorKind(Enum):
    IO_ERROR = "io_error"
    EMPTY_FILE = "empty_file"
    INVALID_FORMAT = "invalid_format"
    SEQUENCE_WITHOUT_HEADER = "sequence_without_header"


class PhylipErrorKind(Enum):
    EMPTY_FILE = "empty_file"
    INVALID_HEADER = "invalid_header"
    INVALID_SEQUENCE_COUNT = "invalid_sequence_count"
    INVALID_SEQUENCE_LENGTH = "invalid_sequence_length"
    NO_SEQUENCE_DATA = "no_sequence_data"
    SEQUENCE_COUNT_MISMATCH = "sequence_count_mismatch"
    SEQUENCE_LENGTH_MISMATCH = "sequence_length_mismatch"
    MISSING_INTERLEAVED_DATA = "missing_interleaved_data"
    PARSE_ERROR = "parse_error"


class NexusErrorKind(Enum):
    NOT_NEXUS = "not_nexus"
    EMPTY_FILE = "empty_file"
    NO_DATA_BLOCK = "no_data_block"
    MISSING_DIMENSIONS = "missing_dimensions"
    MISSING_MATRIX = "missing_matrix"
    INVALID_DIMENSIONS = "invalid_dimensions"
    MISSING_NTAX = "missing_ntax"
    SEQUENCE_COUNT_MISMATCH = "sequence_count_mismatch"
    SEQUENCE_LENGTH_MISMATCH = "sequence_length_mismatch"
    UNTERMINATED_MATRIX = "unterminated_matrix"
    DUPLICATE_NAME = "duplicate_name"
    PARSE_ERROR = "parse_error"


class _FormatError(ParseError):
    """Shared shape of the per-format errors: a kind, a detail, a line."""

    label = ""
    messages = {}

    def __init__(self, kind: Enum, detail: str = "", line: Optional[int] = None) -> None:
        self.kind = kind
        self.detail = detail
        self.line = line
        text = self.messages[kind].format(detail=detail, line=line)
        super().__init__(f"{self.label} error: {text}")


class FastaError(_FormatError):
    """FASTA parsing failure."""

    label = "FASTA"
    messages = {
        FastaErrorKind.IO_ERROR: "Failed to open file: {detail}",
        FastaErrorKind.EMPTY_FILE: "Empty FASTA file",
        FastaErrorKind.INVALID_FORMAT: "Invalid FASTA format: {detail} at line {line}",
        FastaErrorKind.SEQUENCE_WITHOUT_HEADER: "Sequence without header at line {line}",
    }


class PhylipError(_FormatError):
    """PHYLIP parsing failure."""

    label = "PHYLIP"
    messages = {
        PhylipErrorKind.EMPTY_FILE: "Empty PHYLIP file",
        PhylipErrorKind.INVALID_HEADER: "Invalid header: expected 'ntax nchar' (two integers), got '{detail}'",
        PhylipErrorKind.INVALID_SEQUENCE_COUNT: "Invalid sequence count in header: '{detail}' is not a valid number",
        PhylipErrorKind.INVALID_SEQUENCE_LENGTH: "Invalid sequence length in header: '{detail}' is not a valid number",
        PhylipErrorKind.NO_SEQUENCE_DATA: "No sequence data found after header",
        PhylipErrorKind.SEQUENCE_COUNT_MISMATCH: "{detail}",
        PhylipErrorKind.SEQUENCE_LENGTH_MISMATCH: "{detail}",
        PhylipErrorKind.MISSING_INTERLEAVED_DATA: "Missing sequence data for '{detail}' in interleaved block",
        PhylipErrorKind.PARSE_ERROR: "Line {line}: {detail}",
    }


class NexusError(_FormatError):
    """NEXUS parsing failure."""

    label = "NEXUS"
    messages = {
        NexusErrorKind.NOT_NEXUS: "Not a NEXUS file (must start with #NEXUS)",
        NexusErrorKind.EMPTY_FILE: "Empty NEXUS file",
        NexusErrorKind.NO_DATA_BLOCK: "No DATA or CHARACTERS block found",
        NexusErrorKind.MISSING_DIMENSIONS: "Missing DIMENSIONS command in {detail} block",
        NexusErrorKind.MISSING_MATRIX: "Missing MATRIX command in {detail} block",
        NexusErrorKind.INVALID_DIMENSIONS: "Invalid DIMENSIONS: {detail}",
        NexusErrorKind.MISSING_NTAX: "NTAX not specified in DIMENSIONS",
        NexusErrorKind.SEQUENCE_COUNT_MISMATCH: "{detail}",
        NexusErrorKind.SEQUENCE_LENGTH_MISMATCH: "{detail}",
        NexusErrorKind.UNTERMINATED_MATRIX: "Unterminated MATRIX (missing ';')",
        NexusErrorKind.DUPLICATE_NAME: "Duplicate sequence name: '{detail}'",
        NexusErrorKind.PARSE_ERROR: "Parse error at line {line}: {detail}",
    }


def count_mismatch_message(expected: int, found: int) -> str:
    return f"Expected {expected} sequences but found {found}"


def length_mismatch_message(name: str, expected: int, found: int) -> str:
    return f"Sequence '{name}' has length {found}, expected {expected}"
