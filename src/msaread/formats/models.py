"""
Data models for parsed sequence alignments.

This module defines the structures every parser produces and every
downstream consumer reads:
- Sequence: an identifier plus an immutable ASCII byte buffer
- Alignment: an ordered collection of sequences with derived properties
  (equal-length validity, alignment length, nucleotide classification)
- SequenceType: the nucleotide/amino-acid classification
- FileFormat: the supported input formats
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from Bio.Align import MultipleSeqAlignment
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord


GAP_CHARS = b"-."
MISSING_CHARS = b"-.? "
NUCLEOTIDE_CHARS = frozenset(b"ACGTUacgtu")

# Sampling limits for the nucleotide ratio estimate
NT_SAMPLE_MAX_SEQUENCES = 100
NT_SAMPLE_MAX_POSITIONS = 1000

NUCLEOTIDE_THRESHOLD = 0.8
NOT_NUCLEOTIDE_THRESHOLD = 0.5


class FileFormat(Enum):
    """Supported alignment file formats."""
    FASTA = "fasta"
    PHYLIP = "phylip"
    NEXUS = "nexus"

    def __str__(self) -> str:
        return self.value.upper()

    @classmethod
    def from_name(cls, name: str) -> "FileFormat":
        """Look up a format by its name (case-insensitive).

        Raises:
            ValueError: If the name is not a known format
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown format '{name}' (choose from: {choices})") from None


@dataclass(frozen=True)
class SequenceType:
    """Nucleotide/amino-acid classification of an alignment.

    Attributes:
        nt_ratio: Fraction of sampled non-gap characters that are A/C/G/T/U.
            Above 0.8 is nucleotide; below 0.5 is likely not nucleotide.
            Values in between are labelled amino acid but not flagged.
    """
    nt_ratio: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.nt_ratio <= 1.0:
            raise ValueError(f"nt_ratio must be within [0, 1], got {self.nt_ratio}")

    @classmethod
    def nucleotide(cls) -> "SequenceType":
        return cls(nt_ratio=1.0)

    @classmethod
    def amino_acid(cls) -> "SequenceType":
        return cls(nt_ratio=0.0)

    @property
    def is_nucleotide(self) -> bool:
        return self.nt_ratio > NUCLEOTIDE_THRESHOLD

    @property
    def is_likely_not_nucleotide(self) -> bool:
        return self.nt_ratio < NOT_NUCLEOTIDE_THRESHOLD

    @property
    def label(self) -> str:
        return "nucleotide" if self.is_nucleotide else "amino acid"


@dataclass(frozen=True)
class Sequence:
    """A single named sequence.

    The data is stored as immutable bytes and checked to be ASCII once here,
    so text views (`as_str`, `char_at`, `slice`) never need re-validation.

    Attributes:
        id: Sequence identifier
        data: Sequence characters (residues, gaps, ambiguity codes)
    """
    id: str
    data: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        data = self.data
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif not isinstance(data, bytes):
            data = bytes(data)
        if not data.isascii():
            raise ValueError(f"Sequence '{self.id}' contains non-ASCII characters")
        object.__setattr__(self, "data", data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Sequence(id={self.id!r}, length={len(self.data)})"

    def as_bytes(self) -> bytes:
        return self.data

    def as_str(self) -> str:
        return self.data.decode("ascii")

    def is_empty(self) -> bool:
        return not self.data

    def byte_at(self, pos: int) -> Optional[int]:
        """Return the byte at `pos`, or None when out of range."""
        if 0 <= pos < len(self.data):
            return self.data[pos]
        return None

    def char_at(self, pos: int) -> Optional[str]:
        """Return the character at `pos`, or None when out of range."""
        byte = self.byte_at(pos)
        return chr(byte) if byte is not None else None

    def slice(self, start: int, end: int) -> str:
        """Return data[start:end] as text, clamped to the sequence bounds."""
        start = max(0, min(start, len(self.data)))
        end = max(start, min(end, len(self.data)))
        return self.data[start:end].decode("ascii")

    def ungapped_length(self) -> int:
        """Return the length of the sequence without gap characters."""
        return len(self.data.translate(None, GAP_CHARS))


def check_alignment_lengths(
    sequences: Iterable[Sequence],
) -> Tuple[bool, Optional[int], Optional[str]]:
    """Check whether all sequences share one length.

    Returns:
        Tuple of (is_valid, alignment_length, warning). An empty collection
        is valid with no length; unequal lengths report the maximum length
        and a warning naming the min/max pair.
    """
    lengths = [len(seq) for seq in sequences]
    if not lengths:
        return True, None, None

    shortest, longest = min(lengths), max(lengths)
    if shortest == longest:
        return True, longest, None

    warning = (
        f"Sequences have different lengths (min: {shortest}, max: {longest}). "
        "Not a valid alignment."
    )
    return False, longest, warning


def _strided(items: List, limit: int) -> List:
    if len(items) <= limit:
        return items
    step = len(items) / limit
    return [items[int(i * step)] for i in range(limit)]


def estimate_nt_ratio(
    sequences: Iterable[Sequence],
    max_sequences: int = NT_SAMPLE_MAX_SEQUENCES,
    max_positions: int = NT_SAMPLE_MAX_POSITIONS,
) -> float:
    """Estimate the fraction of residues that are nucleotides.

    The sample is deterministic: an evenly strided subset of at most
    `max_sequences` sequences, and of each one at most `max_positions`
    evenly strided positions. Gap and missing characters are skipped.

    Returns:
        Ratio in [0, 1]; 0.0 when no residue was sampled.
    """
    residues = 0
    nucleotides = 0
    for seq in _strided(list(sequences), max_sequences):
        data = seq.as_bytes()
        if len(data) > max_positions:
            step = len(data) / max_positions
            data = bytes(data[int(i * step)] for i in range(max_positions))
        for byte in data.translate(None, MISSING_CHARS):
            residues += 1
            if byte in NUCLEOTIDE_CHARS:
                nucleotides += 1

    if residues == 0:
        return 0.0
    return nucleotides / residues


class Alignment:
    """An ordered collection of sequences with derived, cached properties.

    Validity, alignment length, warning, and sequence type are computed
    exactly once, here. Sequence order is insertion order and is never
    re-sorted. Alignments are not mutated after construction; transforms
    build a new Alignment instead.

    Attributes:
        sequences: Tuple of sequences in file order
        is_valid_alignment: True if all sequences have the same length
        warning: Human-readable message when lengths differ
        sequence_type: Nucleotide/amino-acid classification
    """

    __slots__ = ("sequences", "is_valid_alignment", "warning", "sequence_type", "_alignment_length")

    def __init__(
        self,
        sequences: Iterable[Sequence] = (),
        sequence_type: Optional[SequenceType] = None,
    ):
        self.sequences: Tuple[Sequence, ...] = tuple(sequences)
        is_valid, length, warning = check_alignment_lengths(self.sequences)
        self.is_valid_alignment: bool = is_valid
        self.warning: Optional[str] = warning
        self._alignment_length: Optional[int] = length
        if sequence_type is None:
            sequence_type = SequenceType(estimate_nt_ratio(self.sequences))
        self.sequence_type: SequenceType = sequence_type

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Union[bytes, str]]]) -> "Alignment":
        """Build an alignment from (id, data) pairs."""
        return cls(Sequence(name, data) for name, data in pairs)

    def __len__(self) -> int:
        """Return the number of sequences."""
        return len(self.sequences)

    def __iter__(self) -> Iterator[Sequence]:
        return iter(self.sequences)

    def __repr__(self) -> str:
        return (
            f"Alignment(sequences={self.sequence_count}, "
            f"length={self.alignment_length}, valid={self.is_valid_alignment})"
        )

    @property
    def sequence_count(self) -> int:
        return len(self.sequences)

    @property
    def alignment_length(self) -> int:
        """Common length, or the maximum length for ragged input; 0 when empty."""
        return self._alignment_length or 0

    @property
    def max_id_length(self) -> int:
        return max((len(seq.id) for seq in self.sequences), default=0)

    def is_empty(self) -> bool:
        return not self.sequences

    def get(self, index: int) -> Optional[Sequence]:
        """Return the sequence at `index`, or None when out of range."""
        if 0 <= index < len(self.sequences):
            return self.sequences[index]
        return None

    def ids(self) -> List[str]:
        return [seq.id for seq in self.sequences]

    def with_sequence_type(self, sequence_type: SequenceType) -> "Alignment":
        """Return a new alignment over the same sequences with an explicit type.

        Used after transforms such as translation, where re-running the
        statistical classifier on the output would misclassify it.
        """
        return Alignment(self.sequences, sequence_type=sequence_type)

    def to_biopython(self) -> MultipleSeqAlignment:
        """Convert to a Biopython MultipleSeqAlignment.

        Raises:
            ValueError: If the sequences do not all have the same length
        """
        if not self.is_valid_alignment:
            raise ValueError(self.warning)

        molecule_type = "DNA" if self.sequence_type.is_nucleotide else "protein"
        records = [
            SeqRecord(
                Seq(seq.as_str()),
                id=seq.id,
                description="",
                annotations={"molecule_type": molecule_type},
            )
            for seq in self.sequences
        ]
        return MultipleSeqAlignment(records)
