"""
Tabular summaries of parsed alignments.

Per-sequence statistics are returned as a pandas DataFrame so they can be
filtered, joined, or written to TSV alongside other pipeline outputs.
"""

from typing import Any, Dict

import pandas as pd

from .models import MISSING_CHARS, NUCLEOTIDE_CHARS, Alignment, Sequence

SEQUENCE_TABLE_COLUMNS = ["id", "length", "ungapped_length", "gap_fraction", "nt_fraction"]


def gap_fraction(sequence: Sequence) -> float:
    """Fraction of positions that are gaps ('-' or '.')."""
    if sequence.is_empty():
        return 0.0
    return 1.0 - sequence.ungapped_length() / len(sequence)


def nt_fraction(sequence: Sequence) -> float:
    """Fraction of non-gap, non-missing residues that are A/C/G/T/U.

    Unlike the alignment-level ratio this is computed over the whole
    sequence, not a sample.
    """
    residues = sequence.as_bytes().translate(None, MISSING_CHARS)
    if not residues:
        return 0.0
    return sum(1 for b in residues if b in NUCLEOTIDE_CHARS) / len(residues)


def sequence_table(alignment: Alignment) -> pd.DataFrame:
    """Build a per-sequence statistics table in alignment order.

    Returns:
        DataFrame with columns: id, length, ungapped_length, gap_fraction,
        nt_fraction
    """
    rows = [
        {
            "id": seq.id,
            "length": len(seq),
            "ungapped_length": seq.ungapped_length(),
            "gap_fraction": gap_fraction(seq),
            "nt_fraction": nt_fraction(seq),
        }
        for seq in alignment
    ]
    return pd.DataFrame(rows, columns=SEQUENCE_TABLE_COLUMNS)


def alignment_summary(alignment: Alignment) -> Dict[str, Any]:
    """Summarize an alignment as a flat dictionary."""
    table = sequence_table(alignment)
    mean_gaps = float(table["gap_fraction"].mean()) if not table.empty else 0.0
    return {
        "num_sequences": alignment.sequence_count,
        "alignment_length": alignment.alignment_length,
        "is_valid_alignment": alignment.is_valid_alignment,
        "nt_ratio": alignment.sequence_type.nt_ratio,
        "sequence_type": alignment.sequence_type.label,
        "mean_gap_fraction": mean_gaps,
    }
