"""
Tests for the Sequence and Alignment data models.

Tests cover:
- Sequence construction, ASCII validation, and accessors
- Alignment validity, length, and warning derivation
- Nucleotide ratio sampling and classification thresholds
- Explicit sequence type overrides and Biopython conversion
"""

import sys
from pathlib import Path

import pytest

# Add src to path for msaread imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from msaread.formats.models import (
    Alignment,
    FileFormat,
    Sequence,
    SequenceType,
    check_alignment_lengths,
    estimate_nt_ratio,
)


class TestSequence:
    """Tests for the Sequence model."""

    def test_sequence_basic(self):
        """Test Sequence creation and accessors."""
        seq = Sequence("seq1", b"ACGT-N")

        assert seq.id == "seq1"
        assert len(seq) == 6
        assert seq.as_bytes() == b"ACGT-N"
        assert seq.as_str() == "ACGT-N"
        assert not seq.is_empty()

    def test_sequence_accepts_str(self):
        """Test that text data is stored as bytes."""
        seq = Sequence("seq1", "ACGT")
        assert seq.data == b"ACGT"
        assert isinstance(seq.data, bytes)

    def test_sequence_accepts_bytearray(self):
        """Test that a growable buffer is frozen into bytes."""
        buf = bytearray(b"AC")
        seq = Sequence("seq1", buf)
        buf.extend(b"GT")
        assert seq.as_bytes() == b"AC"

    def test_sequence_rejects_non_ascii(self):
        """Test ASCII validation at construction."""
        with pytest.raises(ValueError, match="non-ASCII"):
            Sequence("seq1", "ACGTé")

    def test_char_and_byte_at(self):
        """Test indexed access with out-of-range positions."""
        seq = Sequence("seq1", "ACGT")
        assert seq.char_at(0) == "A"
        assert seq.char_at(3) == "T"
        assert seq.char_at(4) is None
        assert seq.char_at(-1) is None
        assert seq.byte_at(1) == ord("C")
        assert seq.byte_at(10) is None

    def test_slice_is_clamped(self):
        """Test slicing past the end of the sequence."""
        seq = Sequence("seq1", "ACGTACGT")
        assert seq.slice(2, 5) == "GTA"
        assert seq.slice(6, 100) == "GT"
        assert seq.slice(50, 100) == ""

    def test_ungapped_length(self):
        """Test gap-free length."""
        assert Sequence("s", "AC--G.T").ungapped_length() == 4

    def test_sequence_is_immutable(self):
        """Test that sequence fields cannot be reassigned."""
        seq = Sequence("seq1", "ACGT")
        with pytest.raises(AttributeError):
            seq.data = b"TTTT"

    def test_sequence_equality(self):
        """Test value equality on id and data."""
        assert Sequence("a", "ACGT") == Sequence("a", b"ACGT")
        assert Sequence("a", "ACGT") != Sequence("b", "ACGT")


class TestAlignmentValidity:
    """Tests for derived alignment properties."""

    def test_empty_alignment(self):
        """Test that an empty alignment is valid with length 0."""
        alignment = Alignment([])
        assert alignment.is_valid_alignment is True
        assert alignment.alignment_length == 0
        assert alignment.warning is None
        assert alignment.is_empty()

    def test_equal_lengths(self):
        """Test a valid alignment."""
        alignment = Alignment([Sequence("a", "ACGT"), Sequence("b", "TGCA")])
        assert alignment.is_valid_alignment is True
        assert alignment.alignment_length == 4
        assert alignment.warning is None

    def test_unequal_lengths(self):
        """Test that ragged input is flagged with min/max lengths."""
        alignment = Alignment([
            Sequence("a", "ACGT"),
            Sequence("b", "ACGTACGT"),
            Sequence("c", "AC"),
        ])
        assert alignment.is_valid_alignment is False
        assert alignment.alignment_length == 8
        assert "min: 2" in alignment.warning
        assert "max: 8" in alignment.warning

    def test_check_alignment_lengths(self):
        """Test the pure length check."""
        assert check_alignment_lengths([]) == (True, None, None)
        assert check_alignment_lengths([Sequence("a", "AC")]) == (True, 2, None)
        ok, length, warning = check_alignment_lengths([Sequence("a", "A"), Sequence("b", "AC")])
        assert ok is False
        assert length == 2
        assert warning is not None

    def test_accessors(self):
        """Test read-only accessors used by viewers."""
        alignment = Alignment.from_pairs([("short", "ACGT"), ("much_longer", "TGCA")])
        assert alignment.sequence_count == 2
        assert len(alignment) == 2
        assert alignment.max_id_length == len("much_longer")
        assert alignment.get(1).id == "much_longer"
        assert alignment.get(2) is None
        assert alignment.get(-1) is None
        assert alignment.ids() == ["short", "much_longer"]
        assert [s.id for s in alignment] == ["short", "much_longer"]

    def test_order_is_preserved(self):
        """Test that sequences are never re-sorted."""
        alignment = Alignment.from_pairs([("z", "A"), ("a", "A"), ("m", "A")])
        assert alignment.ids() == ["z", "a", "m"]

    def test_sequences_are_a_tuple(self):
        """Test that the sequence collection cannot be mutated in place."""
        alignment = Alignment.from_pairs([("a", "ACGT")])
        assert isinstance(alignment.sequences, tuple)


class TestSequenceType:
    """Tests for nucleotide classification."""

    def test_nucleotide_alignment(self):
        """Test that DNA is classified as nucleotide."""
        alignment = Alignment.from_pairs([("a", "ACGTACGT--"), ("b", "acgtnacg??")])
        assert alignment.sequence_type.is_nucleotide

    def test_protein_alignment(self):
        """Test that protein is classified as not nucleotide."""
        alignment = Alignment.from_pairs([("a", "MKVLHEWQRPSD"), ("b", "MKILHEFQRPTD")])
        assert not alignment.sequence_type.is_nucleotide
        assert alignment.sequence_type.is_likely_not_nucleotide

    def test_dead_zone(self):
        """Test ratios between 0.5 and 0.8 are neither flag."""
        seq_type = SequenceType(0.6)
        assert not seq_type.is_nucleotide
        assert not seq_type.is_likely_not_nucleotide
        assert seq_type.label == "amino acid"

    def test_threshold_boundaries(self):
        """Test the exact boundary values."""
        assert not SequenceType(0.8).is_nucleotide
        assert SequenceType(0.81).is_nucleotide
        assert not SequenceType(0.5).is_likely_not_nucleotide
        assert SequenceType(0.49).is_likely_not_nucleotide

    def test_ratio_out_of_range(self):
        """Test that ratios outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            SequenceType(1.5)

    def test_estimate_ignores_gaps(self):
        """Test that gap and missing characters are not sampled."""
        ratio = estimate_nt_ratio([Sequence("a", "AC--..??GT")])
        assert ratio == 1.0

    def test_estimate_no_residues(self):
        """Test an all-gap alignment."""
        assert estimate_nt_ratio([Sequence("a", "----")]) == 0.0
        assert estimate_nt_ratio([]) == 0.0

    def test_estimate_is_deterministic(self):
        """Test that sampling a large alignment gives a stable answer."""
        seqs = [Sequence(f"s{i}", "ACGTMKLV" * 500) for i in range(300)]
        first = estimate_nt_ratio(seqs)
        second = estimate_nt_ratio(seqs)
        assert first == second
        assert 0.0 <= first <= 1.0

    def test_explicit_override(self):
        """Test that with_sequence_type re-tags without reclassifying."""
        dna = Alignment.from_pairs([("a", "ACGT"), ("b", "ACGA")])
        protein = dna.with_sequence_type(SequenceType.amino_acid())

        assert dna.sequence_type.is_nucleotide
        assert protein.sequence_type.nt_ratio == 0.0
        assert protein.sequences == dna.sequences

    def test_explicit_type_at_construction(self):
        """Test that a supplied type skips the classifier."""
        alignment = Alignment([Sequence("a", "MKV")], sequence_type=SequenceType.nucleotide())
        assert alignment.sequence_type.is_nucleotide


class TestBiopythonConversion:
    """Tests for conversion to Biopython objects."""

    def test_to_biopython(self):
        """Test conversion of a valid alignment."""
        alignment = Alignment.from_pairs([("a", "ACGT"), ("b", "AC-T")])
        msa = alignment.to_biopython()

        assert len(msa) == 2
        assert len(msa[0].seq) == 4
        assert msa[0].id == "a"
        assert str(msa[1].seq) == "AC-T"
        assert msa[0].annotations["molecule_type"] == "DNA"

    def test_to_biopython_rejects_ragged(self):
        """Test that ragged alignments cannot be converted."""
        alignment = Alignment.from_pairs([("a", "ACGT"), ("b", "AC")])
        with pytest.raises(ValueError, match="different lengths"):
            alignment.to_biopython()


class TestFileFormat:
    """Tests for the FileFormat enum."""

    def test_from_name(self):
        """Test case-insensitive lookup."""
        assert FileFormat.from_name("FASTA") is FileFormat.FASTA
        assert FileFormat.from_name(" nexus ") is FileFormat.NEXUS

    def test_from_name_unknown(self):
        """Test unknown names."""
        with pytest.raises(ValueError, match="Unknown format"):
            FileFormat.from_name("clustal")

    def test_display(self):
        """Test display names."""
        assert str(FileFormat.PHYLIP) == "PHYLIP"
