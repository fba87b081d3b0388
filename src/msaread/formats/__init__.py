"""
msaread formats: multi-format alignment detection and parsing.

This package turns FASTA, PHYLIP, and NEXUS alignment files into a single
normalized Alignment structure.

Key Features:
- Format detection from extension, content sniffing, or exhaustive trial
- FASTA with multi-line sequences
- PHYLIP sequential/interleaved, strict or relaxed name columns
- NEXUS DATA/CHARACTERS blocks with comments, quoted names, INTERLEAVE,
  and MATCHCHAR
- Self-validating alignments (equal-length check, nucleotide ratio)

Example Usage:
    >>> from msaread.formats import parse_file
    >>> alignment = parse_file("example.nex")
    >>> alignment.sequence_count, alignment.alignment_length
    (27, 860)

    # Force a format when detection is ambiguous:
    >>> from msaread.formats import FileFormat, parse_file_as
    >>> alignment = parse_file_as("alignment.txt", FileFormat.PHYLIP)
"""

# Data models
from .models import (
    Alignment,
    FileFormat,
    Sequence,
    SequenceType,
    check_alignment_lengths,
    estimate_nt_ratio,
)

# Errors
from .errors import (
    AmbiguousFormatError,
    EmptyFileError,
    FastaError,
    FastaErrorKind,
    FileReadError,
    NexusError,
    NexusErrorKind,
    ParseError,
    PhylipError,
    PhylipErrorKind,
    UnknownFormatError,
)

# Format parsers
from .fasta import parse_fasta_file, parse_fasta_lines, parse_fasta_str
from .nexus import parse_nexus_str, tokenize_matrix
from .phylip import parse_phylip_str, split_name_and_sequence

# Detection and dispatch
from .parser import (
    detect_from_content,
    detect_from_extension,
    parse_content,
    parse_file,
    parse_file_as,
    parse_file_with_format,
    parse_file_with_options,
    parse_string,
    write_alignment,
)

# Summaries
from .stats import alignment_summary, sequence_table


__all__ = [
    # Models
    "Alignment",
    "FileFormat",
    "Sequence",
    "SequenceType",
    "check_alignment_lengths",
    "estimate_nt_ratio",
    # Errors
    "AmbiguousFormatError",
    "EmptyFileError",
    "FastaError",
    "FastaErrorKind",
    "FileReadError",
    "NexusError",
    "NexusErrorKind",
    "ParseError",
    "PhylipError",
    "PhylipErrorKind",
    "UnknownFormatError",
    # Parsers
    "parse_fasta_file",
    "parse_fasta_lines",
    "parse_fasta_str",
    "parse_nexus_str",
    "parse_phylip_str",
    "split_name_and_sequence",
    "tokenize_matrix",
    # Detection and dispatch
    "detect_from_content",
    "detect_from_extension",
    "parse_content",
    "parse_file",
    "parse_file_as",
    "parse_file_with_format",
    "parse_file_with_options",
    "parse_string",
    "write_alignment",
    # Summaries
    "alignment_summary",
    "sequence_table",
]
