"""
Strict validation of parsed alignments.

The parsers are deliberately lenient: declared dimensions steer parsing but
mismatches are not errors. This module provides the strict checks for
callers that want them, reported in the same wording the parsers reserve
for their count/length mismatch errors.
"""

from collections import Counter
from typing import List, Optional, Tuple

from msaread.formats.errors import count_mismatch_message, length_mismatch_message
from msaread.formats.models import Alignment


def validate_alignment(
    alignment: Alignment,
    expected_ntax: Optional[int] = None,
    expected_nchar: Optional[int] = None,
    strict: bool = False,
) -> Tuple[bool, List[str], List[str]]:
    """
    Validate an alignment against declared dimensions.

    Args:
        alignment: Parsed alignment to check
        expected_ntax: Declared number of sequences, if known
        expected_nchar: Declared sequence length, if known
        strict: If True, treat warnings as errors

    Returns:
        Tuple of (is_valid, errors, warnings)
        - is_valid: True if no errors were found
        - errors: List of critical error messages
        - warnings: List of warning messages
    """
    errors: List[str] = []
    warnings: List[str] = []

    if alignment.is_empty():
        errors.append("Alignment contains no sequences")
        return False, errors, warnings

    if expected_ntax is not None and alignment.sequence_count != expected_ntax:
        errors.append(count_mismatch_message(expected_ntax, alignment.sequence_count))

    if expected_nchar is not None:
        for seq in alignment:
            if len(seq) != expected_nchar:
                errors.append(length_mismatch_message(seq.id, expected_nchar, len(seq)))

    if not alignment.is_valid_alignment:
        warnings.append(alignment.warning)

    duplicates = [name for name, count in Counter(alignment.ids()).items() if count > 1]
    for name in duplicates:
        warnings.append(f"Duplicate sequence name: '{name}'")

    empty = [seq.id for seq in alignment if seq.is_empty()]
    if empty:
        warnings.append(f"{len(empty)} sequence(s) have no data: {empty[:5]}{'...' if len(empty) > 5 else ''}")

    if strict and warnings:
        errors.extend(warnings)
        warnings = []

    return len(errors) == 0, errors, warnings
