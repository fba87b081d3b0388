"""
PHYLIP alignment parsing, sequential and interleaved.

The first line holds the number of sequences and the sequence length:

     3 20
    Seq1      ACGTACGTAC
    Seq2      TGCATGCATG
    Seq3      AAAACCCCGG

    GTGTGTGTGT
    CACACACACA
    TTTTTTTTTT

Names may use the strict 10-column layout or be separated from the data by
whitespace (relaxed PHYLIP). After all sequences have been named, a blank
line starts an interleaved block whose lines are assigned to sequences in
order; blocks that repeat the sequence names are also accepted.
"""

import logging
import re
from typing import List, Optional, Tuple

from .errors import PhylipError, PhylipErrorKind
from .models import Alignment, Sequence

logger = logging.getLogger(__name__)

STRICT_NAME_WIDTH = 10
SEQUENCE_PUNCTUATION = "-.*?"

_UNSIGNED_INT = re.compile(r"[0-9]+")


def is_sequence_char(c: str) -> bool:
    """Return True for residue letters and gap/stop/missing symbols."""
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c in SEQUENCE_PUNCTUATION


def _is_sequence_data(text: str) -> bool:
    return bool(text) and all(is_sequence_char(c) for c in text)


def _squeeze(text: str) -> str:
    return "".join(text.split())


def split_name_and_sequence(line: str) -> Tuple[Optional[str], str]:
    """Split a PHYLIP data line into an optional name and sequence data.

    Interpretations are tried in order: strict 10-column name, relaxed
    whitespace-separated name, bare continuation data, and finally the whole
    line as a name with no data.

    Returns:
        (name, data); name is None for continuation lines
    """
    line = line.strip()
    if not line:
        return None, ""

    if len(line) >= STRICT_NAME_WIDTH:
        name = line[:STRICT_NAME_WIDTH].strip()
        data = _squeeze(line[STRICT_NAME_WIDTH:])
        if name and len(name.split()) == 1 and _is_sequence_data(data):
            return name, data

    parts = line.split(None, 1)
    if len(parts) == 2:
        name, data = parts[0], _squeeze(parts[1])
        if _is_sequence_data(data):
            return name, data

    data = _squeeze(line)
    if _is_sequence_data(data):
        return None, data

    return line, ""


def _parse_header(header: str) -> Tuple[int, int]:
    parts = header.split()
    if len(parts) < 2:
        raise PhylipError(PhylipErrorKind.INVALID_HEADER, header)

    if not _UNSIGNED_INT.fullmatch(parts[0]) or int(parts[0]) == 0:
        raise PhylipError(PhylipErrorKind.INVALID_SEQUENCE_COUNT, parts[0])
    if not _UNSIGNED_INT.fullmatch(parts[1]):
        raise PhylipError(PhylipErrorKind.INVALID_SEQUENCE_LENGTH, parts[1])

    return int(parts[0]), int(parts[1])


def _assemble(lines: List[str], ntax: int, nchar: int) -> List[Tuple[str, List[str]]]:
    sequences: List[Tuple[str, List[str]]] = []
    lengths: List[int] = []
    index_by_name = {}
    interleaved = False
    next_slot = 0

    def append(idx: int, data: str) -> None:
        sequences[idx][1].append(data)
        lengths[idx] += len(data)

    for line in lines:
        stripped = line.strip()
        if not stripped:
            if len(sequences) == ntax:
                interleaved = True
                next_slot = 0
            continue

        name, data = split_name_and_sequence(stripped)

        if interleaved:
            if name is not None and name in index_by_name:
                append(index_by_name[name], data)
            else:
                if name is not None and _is_sequence_data(_squeeze(stripped)):
                    data = _squeeze(stripped)
                append(next_slot % len(sequences), data)
                next_slot += 1
        elif name is not None and len(sequences) < ntax:
            index_by_name.setdefault(name, len(sequences))
            sequences.append((name, [data]))
            lengths.append(len(data))
        elif name is not None:
            if name in index_by_name:
                append(index_by_name[name], data)
            elif _is_sequence_data(_squeeze(stripped)):
                append(len(sequences) - 1, _squeeze(stripped))
        elif sequences:
            append(len(sequences) - 1, data)

        if nchar > 0 and len(sequences) == ntax and all(n >= nchar for n in lengths):
            break

    return sequences


def parse_phylip_str(content: str) -> Alignment:
    """Parse PHYLIP content held in memory.

    Declared counts are used to drive assembly, not enforced: a file with
    fewer sequences than declared still parses, and unequal lengths are
    reported by the Alignment itself.

    Raises:
        PhylipError: On an empty file, a malformed header, or no data
    """
    lines = content.splitlines()

    header_idx = next((i for i, line in enumerate(lines) if line.strip()), None)
    if header_idx is None:
        raise PhylipError(PhylipErrorKind.EMPTY_FILE)

    ntax, nchar = _parse_header(lines[header_idx].strip())
    data_lines = lines[header_idx + 1:]

    sequences = _assemble(data_lines, ntax, nchar)
    if not sequences:
        raise PhylipError(PhylipErrorKind.NO_SEQUENCE_DATA)

    logger.debug("Parsed %d PHYLIP sequences (header: %d x %d)", len(sequences), ntax, nchar)
    return Alignment(Sequence(name, "".join(parts)) for name, parts in sequences)
