"""
NEXUS alignment parsing (DATA and CHARACTERS blocks).

    #NEXUS
    BEGIN DATA;
      DIMENSIONS NTAX=3 NCHAR=10;
      FORMAT DATATYPE=DNA GAP=- MISSING=? MATCHCHAR=.;
      MATRIX
        seq1 ACGTACGTAC
        seq2 ....TG....
        'seq 3' AAAACCCCGG
      ;
    END;

Parsing runs in three passes:
1. Header check: the first non-blank line must start with #NEXUS.
2. Block extraction: the lines of the first DATA/CHARACTERS block.
3. Command normalization: bracket comments are stripped and multi-line
   commands are folded into one command each. MATRIX lines are kept
   verbatim (comments and blank lines included) and handed to the matrix
   tokenizer.

Supported commands are DIMENSIONS (NTAX, NCHAR), FORMAT (INTERLEAVE,
MATCHCHAR) and MATRIX, sequential or interleaved. Keywords are
case-insensitive. Declared dimensions guide the matrix reader but are not
enforced; the Alignment's own length check decides validity.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple

from .errors import NexusError, NexusErrorKind
from .models import Alignment, Sequence

logger = logging.getLogger(__name__)

Line = Tuple[int, str]

_BLOCK_END = re.compile(r"(END|ENDBLOCK)\b", re.IGNORECASE)
_FALSE_VALUES = ("NO", "FALSE", "0")


# ---------------------------------------------------------------------------
# Block extraction and command normalization
# ---------------------------------------------------------------------------

@dataclass
class NexusCommand:
    """One logical command of a DATA/CHARACTERS block.

    Attributes:
        keyword: Upper-cased command name (DIMENSIONS, FORMAT, MATRIX, ...)
        text: Command text with comments removed and no trailing ';'
        line: 1-based line number where the command starts
        body: For MATRIX only, the raw (line number, text) pairs of the matrix
    """
    keyword: str
    text: str
    line: int
    body: List[Line] = field(default_factory=list)


def strip_comments(text: str, in_comment: bool = False) -> Tuple[str, bool]:
    """Remove bracketed [comments] from one line of text.

    Args:
        text: Line to clean
        in_comment: Whether a comment opened on a previous line is still open

    Returns:
        (cleaned text, whether a comment is still open at end of line)
    """
    out = []
    for c in text:
        if in_comment:
            if c == "]":
                in_comment = False
        elif c == "[":
            in_comment = True
        else:
            out.append(c)
    return "".join(out), in_comment


def extract_data_block(lines: List[str]) -> List[Line]:
    """Return the trimmed lines of the first DATA or CHARACTERS block.

    Raises:
        NexusError: NO_DATA_BLOCK if no such block begins in the file
    """
    block: List[Line] = []
    in_block = False

    for number, line in enumerate(lines, start=1):
        trimmed = line.strip()
        upper = trimmed.upper()
        if not in_block:
            if upper.startswith("BEGIN") and ("DATA" in upper or "CHARACTERS" in upper):
                in_block = True
            continue
        if _BLOCK_END.match(upper):
            break
        block.append((number, trimmed))

    if not in_block:
        raise NexusError(NexusErrorKind.NO_DATA_BLOCK)
    return block


def _is_matrix_start(text: str) -> bool:
    return text[:6].upper() == "MATRIX" and (len(text) == 6 or not text[6].isalnum())


def normalize_commands(lines: List[Line]) -> List[NexusCommand]:
    """Fold block lines into logical ';'-terminated commands.

    Outside MATRIX, comments are removed and text is accumulated until ';'.
    Inside MATRIX, lines are kept verbatim until a line whose comment-free
    content ends in ';'; that line is kept without the ';' and normal
    accumulation resumes.
    """
    commands: List[NexusCommand] = []
    pending: List[str] = []
    pending_line: Optional[int] = None
    matrix: Optional[NexusCommand] = None
    in_comment = False

    def flush() -> None:
        nonlocal pending_line
        text = " ".join(pending).strip()
        if text:
            commands.append(NexusCommand(text.split(None, 1)[0].upper(), text, pending_line))
        pending.clear()
        pending_line = None

    for number, line in lines:
        clean, in_comment = strip_comments(line, in_comment)
        clean = clean.strip()

        if matrix is not None:
            if clean.endswith(";"):
                rest = clean[:-1].strip()
                if rest:
                    matrix.body.append((number, rest))
                matrix = None
            else:
                matrix.body.append((number, line))
            continue

        if not clean:
            continue

        if _is_matrix_start(clean):
            flush()
            matrix = NexusCommand("MATRIX", "MATRIX", number)
            commands.append(matrix)
            rest = clean[6:].strip()
            if rest.endswith(";"):
                rest = rest[:-1].strip()
                matrix.body.append((number, rest))
                matrix = None
            elif rest:
                matrix.body.append((number, rest))
            continue

        pieces = clean.split(";")
        for i, piece in enumerate(pieces):
            piece = piece.strip()
            if piece:
                if pending_line is None:
                    pending_line = number
                pending.append(piece)
            if i < len(pieces) - 1:
                flush()

    flush()
    return commands


def extract_param(text: str, name: str) -> Optional[str]:
    """Find the value of NAME=value in a command (case-insensitive).

    The value ends at whitespace, ';', or end of string. Whitespace around
    '=' is allowed.
    """
    match = re.search(rf"\b{re.escape(name)}\s*=\s*([^\s;]+)", text, re.IGNORECASE)
    return match.group(1) if match else None


def _parse_count(value: Optional[str]) -> Optional[int]:
    if value is not None and value.isdigit() and value.isascii():
        return int(value)
    return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


# ---------------------------------------------------------------------------
# Matrix tokenizer
# ---------------------------------------------------------------------------

class TokenizerState(Enum):
    NORMAL = "normal"
    IN_COMMENT = "in_comment"
    IN_SINGLE_QUOTE = "in_single_quote"
    IN_DOUBLE_QUOTE = "in_double_quote"


class TokenAction(Enum):
    APPEND = "append"
    SKIP = "skip"
    FLUSH = "flush"
    OPEN_QUOTE = "open_quote"
    CLOSE_QUOTE = "close_quote"
    STOP = "stop"


class Token(NamedTuple):
    value: str
    quoted: bool
    line: int


_S = TokenizerState
_A = TokenAction

# (state, character class) -> (next state, action)
TRANSITIONS: Dict[Tuple[TokenizerState, str], Tuple[TokenizerState, TokenAction]] = {
    (_S.NORMAL, "["): (_S.IN_COMMENT, _A.FLUSH),
    (_S.NORMAL, "]"): (_S.NORMAL, _A.SKIP),
    (_S.NORMAL, "'"): (_S.IN_SINGLE_QUOTE, _A.OPEN_QUOTE),
    (_S.NORMAL, '"'): (_S.IN_DOUBLE_QUOTE, _A.OPEN_QUOTE),
    (_S.NORMAL, ";"): (_S.NORMAL, _A.STOP),
    (_S.NORMAL, "space"): (_S.NORMAL, _A.FLUSH),
    (_S.IN_COMMENT, "]"): (_S.NORMAL, _A.SKIP),
    (_S.IN_SINGLE_QUOTE, "'"): (_S.NORMAL, _A.CLOSE_QUOTE),
    (_S.IN_DOUBLE_QUOTE, '"'): (_S.NORMAL, _A.CLOSE_QUOTE),
}

# Fallback for character classes without an explicit entry
DEFAULT_ACTIONS: Dict[TokenizerState, TokenAction] = {
    _S.NORMAL: _A.APPEND,
    _S.IN_COMMENT: _A.SKIP,
    _S.IN_SINGLE_QUOTE: _A.APPEND,
    _S.IN_DOUBLE_QUOTE: _A.APPEND,
}


def _char_class(c: str) -> str:
    if c in "[]'\";":
        return c
    if c.isspace():
        return "space"
    return "other"


def transition(state: TokenizerState, c: str) -> Tuple[TokenizerState, TokenAction]:
    """Return the next state and action for character `c` in `state`."""
    key = (state, _char_class(c))
    if key in TRANSITIONS:
        return TRANSITIONS[key]
    return state, DEFAULT_ACTIONS[state]


def tokenize_matrix(lines: List[Line]) -> List[Token]:
    """Split MATRIX lines into tokens.

    Whitespace separates tokens outside comments and quotes. [Comments] are
    dropped. A quoted token keeps its whitespace and brackets literally and
    is returned without the quotes. ';' outside quotes ends tokenization.
    """
    tokens: List[Token] = []
    chars: List[str] = []
    quoted = False
    start_line = 0
    state = TokenizerState.NORMAL

    def flush() -> None:
        nonlocal quoted
        if chars or quoted:
            tokens.append(Token("".join(chars), quoted, start_line))
        chars.clear()
        quoted = False

    for number, line in lines:
        for c in line + "\n":
            state, action = transition(state, c)
            if action is TokenAction.STOP:
                flush()
                return tokens
            if action is TokenAction.FLUSH:
                flush()
            elif action is TokenAction.OPEN_QUOTE:
                if not chars and not quoted:
                    start_line = number
                quoted = True
            elif action is TokenAction.APPEND:
                if not chars and not quoted:
                    start_line = number
                chars.append(c)

    flush()
    return tokens


# ---------------------------------------------------------------------------
# Matrix interpretation
# ---------------------------------------------------------------------------

def looks_like_name(token: Token) -> bool:
    """Guess whether a token is a taxon name rather than sequence data.

    Only used when NCHAR is unknown. Quoted tokens, tokens mixing letters
    and digits, and tokens containing '_' are treated as names. Sequence
    data containing digits or underscores is misread as a name.
    """
    if token.quoted:
        return True
    value = token.value
    has_letters = any(c.isascii() and c.isalpha() for c in value)
    has_digits = any(c.isascii() and c.isdigit() for c in value)
    return (has_letters and has_digits) or "_" in value


def _check_name(token: Token) -> str:
    if not token.value:
        raise NexusError(NexusErrorKind.PARSE_ERROR, "empty taxon name", line=token.line)
    return token.value


class _Row:
    __slots__ = ("name", "parts", "length")

    def __init__(self, name: str):
        self.name = name
        self.parts: List[str] = []
        self.length = 0

    def extend(self, token: Token) -> None:
        if not token.value.isascii():
            raise NexusError(
                NexusErrorKind.PARSE_ERROR,
                f"non-ASCII character in sequence '{self.name}'",
                line=token.line,
            )
        self.parts.append(token.value)
        self.length += len(token.value)


def _read_sequential(tokens: List[Token], ntax: int, nchar: int) -> List[_Row]:
    rows: List[_Row] = []
    i = 0
    while i < len(tokens) and (ntax == 0 or len(rows) < ntax):
        row = _Row(_check_name(tokens[i]))
        i += 1
        while i < len(tokens):
            if nchar > 0 and row.length >= nchar:
                break
            if nchar == 0 and row.parts and looks_like_name(tokens[i]):
                break
            row.extend(tokens[i])
            i += 1
        rows.append(row)
    return rows


def _read_interleaved(tokens: List[Token], ntax: int, nchar: int) -> List[_Row]:
    rows: List[_Row] = []
    index_by_name: Dict[str, int] = {}
    next_slot = 0
    slot_line: Optional[int] = None
    slot = 0
    i = 0

    while i < len(tokens):
        if nchar > 0 and len(rows) == ntax and all(r.length >= nchar for r in rows):
            break

        token = tokens[i]
        i += 1

        if token.value in index_by_name:
            if i < len(tokens):
                rows[index_by_name[token.value]].extend(tokens[i])
                i += 1
        elif len(rows) < ntax:
            index_by_name[token.value] = len(rows)
            row = _Row(_check_name(token))
            if i < len(tokens):
                row.extend(tokens[i])
                i += 1
            rows.append(row)
        else:
            # Unnamed data: one source line feeds one sequence, in order
            if token.line != slot_line:
                slot = next_slot % ntax
                next_slot += 1
                slot_line = token.line
            rows[slot].extend(token)

    return rows


def apply_matchchar(
    pairs: List[Tuple[str, bytes]], matchchar: str
) -> List[Tuple[str, bytes]]:
    """Replace MATCHCHAR in sequences 2..N with the first sequence's residue.

    The first sequence is the reference and is never rewritten. Positions
    beyond the reference's length are left unchanged.
    """
    if len(pairs) < 2 or len(matchchar) != 1 or not matchchar.isascii():
        return pairs

    match_byte = ord(matchchar)
    reference = pairs[0][1]
    result = [pairs[0]]
    for name, data in pairs[1:]:
        if match_byte in data:
            data = bytes(
                reference[i] if b == match_byte and i < len(reference) else b
                for i, b in enumerate(data)
            )
        result.append((name, data))
    return result


def parse_matrix(
    tokens: List[Token],
    ntax: int = 0,
    nchar: int = 0,
    interleave: bool = False,
    matchchar: Optional[str] = None,
) -> List[Tuple[str, bytes]]:
    """Interpret matrix tokens as (name, data) pairs.

    Args:
        tokens: Output of tokenize_matrix
        ntax: Declared number of taxa (0 if unknown)
        nchar: Declared number of characters (0 if unknown)
        interleave: Whether FORMAT declared INTERLEAVE
        matchchar: Optional MATCHCHAR symbol

    Returns:
        List of (name, data) pairs in matrix order
    """
    if not tokens:
        return []

    if interleave and ntax > 0:
        rows = _read_interleaved(tokens, ntax, nchar)
    else:
        rows = _read_sequential(tokens, ntax, nchar)

    pairs = [(row.name, "".join(row.parts).encode("ascii")) for row in rows]
    if matchchar:
        pairs = apply_matchchar(pairs, matchchar)
    return pairs


def _read_format(text: str) -> Tuple[bool, Optional[str]]:
    upper = text.upper()
    interleave = "INTERLEAVE" in upper
    value = extract_param(text, "INTERLEAVE")
    if interleave and value is not None and value.upper() in _FALSE_VALUES:
        interleave = False

    matchchar = extract_param(text, "MATCHCHAR")
    if matchchar is not None:
        matchchar = _unquote(matchchar)[:1] or None
    return interleave, matchchar


def parse_data_block(commands: List[NexusCommand]) -> Alignment:
    """Interpret normalized DATA/CHARACTERS commands into an Alignment."""
    ntax: Optional[int] = None
    nchar: Optional[int] = None
    interleave = False
    matchchar: Optional[str] = None
    matrix: Optional[NexusCommand] = None

    for command in commands:
        if command.keyword == "DIMENSIONS":
            ntax = _parse_count(extract_param(command.text, "NTAX")) or ntax
            nchar = _parse_count(extract_param(command.text, "NCHAR")) or nchar
        elif command.keyword == "FORMAT":
            # A FORMAT without MATCHCHAR keeps the one declared earlier
            interleave, declared = _read_format(command.text)
            matchchar = declared or matchchar
        elif command.keyword == "MATRIX" and matrix is None:
            matrix = command

    tokens = tokenize_matrix(matrix.body) if matrix is not None else []
    pairs = parse_matrix(tokens, ntax or 0, nchar or 0, interleave, matchchar)
    if not pairs:
        raise NexusError(NexusErrorKind.NO_DATA_BLOCK)

    logger.debug(
        "Parsed %d NEXUS sequences (NTAX=%s NCHAR=%s interleave=%s)",
        len(pairs), ntax, nchar, interleave,
    )
    return Alignment(Sequence(name, data) for name, data in pairs)


def parse_nexus_str(content: str) -> Alignment:
    """Parse NEXUS content held in memory.

    Raises:
        NexusError: EMPTY_FILE, NOT_NEXUS, NO_DATA_BLOCK, or PARSE_ERROR
    """
    lines = content.splitlines()

    first = next((line.strip() for line in lines if line.strip()), None)
    if first is None:
        raise NexusError(NexusErrorKind.EMPTY_FILE)
    if not first.upper().startswith("#NEXUS"):
        raise NexusError(NexusErrorKind.NOT_NEXUS)

    block = extract_data_block(lines)
    return parse_data_block(normalize_commands(block))
