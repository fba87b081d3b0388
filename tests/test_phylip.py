"""
Tests for PHYLIP parsing.

Tests cover:
- Strict 10-column and relaxed name layouts
- Sequential (multi-line) and interleaved blocks
- Header validation and lenient handling of declared counts
"""

import sys
from pathlib import Path

import pytest

# Add src to path for msaread imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from msaread.formats.errors import PhylipError, PhylipErrorKind
from msaread.formats.phylip import is_sequence_char, parse_phylip_str, split_name_and_sequence


STRICT = (
    " 3 10\n"
    "Seq1      ACGTACGTAC\n"
    "Seq2      TGCATGCATG\n"
    "Seq3      AAAACCCCGG\n"
)

INTERLEAVED = (
    " 3 20\n"
    "Seq1      ACGTACGTAC\n"
    "Seq2      TGCATGCATG\n"
    "Seq3      AAAACCCCGG\n"
    "\n"
    "GTGTGTGTGT\n"
    "CACACACACA\n"
    "TTTTTTTTTT\n"
)


class TestSplitNameAndSequence:
    """Tests for line splitting heuristics."""

    def test_strict_columns(self):
        """Test a name padded to ten columns."""
        assert split_name_and_sequence("Seq1      ACGTACGTAC") == ("Seq1", "ACGTACGTAC")

    def test_strict_columns_with_spaced_data(self):
        """Test that spaces inside the data are removed."""
        assert split_name_and_sequence("Seq1      ACGTA CGTAC") == ("Seq1", "ACGTACGTAC")

    def test_relaxed_name(self):
        """Test a long name separated by whitespace."""
        assert split_name_and_sequence("a_very_long_name ACGT") == ("a_very_long_name", "ACGT")

    def test_short_relaxed_line(self):
        """Test a line shorter than ten columns."""
        assert split_name_and_sequence("seq1 ACGT") == ("seq1", "ACGT")

    def test_continuation(self):
        """Test a bare data line."""
        assert split_name_and_sequence("ACGT-ACGT") == (None, "ACGT-ACGT")

    def test_name_only(self):
        """Test a line that is not sequence data."""
        assert split_name_and_sequence("123 456") == ("123 456", "")

    def test_blank(self):
        """Test an empty line."""
        assert split_name_and_sequence("   ") == (None, "")

    def test_sequence_chars(self):
        """Test the accepted sequence alphabet."""
        for c in "AZaz-.*?":
            assert is_sequence_char(c)
        for c in "0 _é":
            assert not is_sequence_char(c)


class TestPhylipParsing:
    """Tests for successful PHYLIP parsing."""

    def test_strict_sequential(self):
        """Test the standard 10-column layout."""
        alignment = parse_phylip_str(STRICT)

        assert alignment.ids() == ["Seq1", "Seq2", "Seq3"]
        assert alignment.get(0).as_str() == "ACGTACGTAC"
        assert alignment.get(2).as_str() == "AAAACCCCGG"
        assert alignment.alignment_length == 10
        assert alignment.is_valid_alignment

    def test_sequential_multiline(self):
        """Test sequences continued on following lines."""
        alignment = parse_phylip_str(" 2 8\nseq1 ACGT\nACGT\nseq2 TTTT\nTTTT\n")
        assert alignment.get(0).as_str() == "ACGTACGT"
        assert alignment.get(1).as_str() == "TTTTTTTT"

    def test_interleaved(self):
        """Test a second block without names."""
        alignment = parse_phylip_str(INTERLEAVED)

        assert alignment.sequence_count == 3
        assert alignment.get(0).as_str() == "ACGTACGTACGTGTGTGTGT"
        assert alignment.get(1).as_str() == "TGCATGCATGCACACACACA"
        assert alignment.get(2).as_str() == "AAAACCCCGGTTTTTTTTTT"
        assert alignment.alignment_length == 20

    def test_interleaved_with_repeated_names(self):
        """Test a second block that repeats the names."""
        text = " 2 8\nseq1 ACGT\nseq2 TTTT\n\nseq1 GGGG\nseq2 CCCC\n"
        alignment = parse_phylip_str(text)
        assert alignment.get(0).as_str() == "ACGTGGGG"
        assert alignment.get(1).as_str() == "TTTTCCCC"

    def test_relaxed_names(self):
        """Test names longer than ten characters."""
        text = " 2 4\na_very_long_name ACGT\nb TGCA\n"
        alignment = parse_phylip_str(text)
        assert alignment.ids() == ["a_very_long_name", "b"]
        assert alignment.get(0).as_str() == "ACGT"

    def test_gaps_and_missing(self):
        """Test gap, stop and missing symbols."""
        alignment = parse_phylip_str(" 2 6\nseq1      AC-GT?\nseq2      A.CG*T\n")
        assert alignment.get(0).as_str() == "AC-GT?"
        assert alignment.get(1).as_str() == "A.CG*T"

    def test_leading_blank_lines(self):
        """Test that the header is the first non-blank line."""
        alignment = parse_phylip_str("\n\n" + STRICT)
        assert alignment.sequence_count == 3

    def test_extra_header_fields(self):
        """Test that tokens after ntax and nchar are ignored."""
        alignment = parse_phylip_str(" 1 4 I\nseq1 ACGT\n")
        assert alignment.get(0).as_str() == "ACGT"

    def test_stops_when_all_sequences_complete(self):
        """Test that lines after every sequence reaches nchar are ignored."""
        alignment = parse_phylip_str(" 2 4\na ACGT\nb TTTT\n\nGGGG\nCCCC\n")
        assert alignment.get(0).as_str() == "ACGT"
        assert alignment.get(1).as_str() == "TTTT"
        assert alignment.alignment_length == 4

    def test_fewer_sequences_than_declared(self):
        """Test that the declared count is not enforced."""
        alignment = parse_phylip_str(" 3 4\na ACGT\nb ACGT\n")
        assert alignment.sequence_count == 2

    def test_unequal_lengths_flagged(self):
        """Test ragged data parses but is flagged."""
        alignment = parse_phylip_str(" 2 4\na ACGT\nb AC\n")
        assert not alignment.is_valid_alignment


class TestPhylipErrors:
    """Tests for PHYLIP error reporting."""

    @pytest.mark.parametrize("content", ["", "  \n\n"])
    def test_empty(self, content):
        """Test empty and whitespace-only input."""
        with pytest.raises(PhylipError) as exc_info:
            parse_phylip_str(content)
        assert exc_info.value.kind is PhylipErrorKind.EMPTY_FILE

    def test_single_token_header(self):
        """Test a header with only one number."""
        with pytest.raises(PhylipError) as exc_info:
            parse_phylip_str("3\nseq1 ACGT\n")
        assert exc_info.value.kind is PhylipErrorKind.INVALID_HEADER

    @pytest.mark.parametrize("count", ["-3", "0", "abc", "3.5"])
    def test_bad_sequence_count(self, count):
        """Test negative, zero and non-numeric counts."""
        with pytest.raises(PhylipError) as exc_info:
            parse_phylip_str(f"{count} 10\nseq1 ACGT\n")
        assert exc_info.value.kind is PhylipErrorKind.INVALID_SEQUENCE_COUNT
        assert count in str(exc_info.value)

    def test_bad_sequence_length(self):
        """Test a non-numeric length."""
        with pytest.raises(PhylipError) as exc_info:
            parse_phylip_str("3 ten\nseq1 ACGT\n")
        assert exc_info.value.kind is PhylipErrorKind.INVALID_SEQUENCE_LENGTH

    def test_no_data(self):
        """Test a header with nothing after it."""
        with pytest.raises(PhylipError) as exc_info:
            parse_phylip_str(" 2 4\n")
        assert exc_info.value.kind is PhylipErrorKind.NO_SEQUENCE_DATA

    def test_error_message_prefix(self):
        """Test that messages are labelled with the format."""
        with pytest.raises(PhylipError, match="^PHYLIP error: "):
            parse_phylip_str("")
