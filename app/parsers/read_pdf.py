import logging
import re
from typing import List

logger = logging.getLogger(__name__)

# Heuristic text extraction straight from the raw PDF bytes. Only uncompressed
# content streams with literal strings are understood; FlateDecode or hex-string
# content comes back empty or as noise.

TEXT_BLOCK_PATTERN = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
# (string) Tj, allowing escaped parens inside the literal
TJ_PATTERN = re.compile(r"\(((?:\\.|[^\\)])*)\)\s*Tj", re.DOTALL)
# [(str) -120 (str)] TJ
TJ_ARRAY_PATTERN = re.compile(r"\[(.*?)\]\s*TJ", re.DOTALL)
ARRAY_STRING_PATTERN = re.compile(r"\(((?:\\.|[^\\)])*)\)", re.DOTALL)
STREAM_PATTERN = re.compile(r"stream\s*(.*?)\s*endstream", re.DOTALL)
ESCAPE_PATTERN = re.compile(r"\\(?:([0-7]{1,3})|(\r\n|\r|\n)|(.))", re.DOTALL)

NON_PRINTABLE_PATTERN = re.compile(r"[^\x20-\x7E\n\r]")
WHITESPACE_PATTERN = re.compile(r"\s+")
CAMEL_BOUNDARY_PATTERN = re.compile(r"([a-z])([A-Z])")

MIN_TEXT_LENGTH = 200
MIN_STREAM_TEXT_LENGTH = 50
MIN_STREAM_WORDS = 5

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "(": "(",
    ")": ")",
    "\\": "\\",
}


def decode_pdf_string(value: str) -> str:
    """Resolves backslash escapes of a PDF literal string (octal, named, line continuation)."""

    def _replace(match: re.Match) -> str:
        octal, newline, char = match.groups()
        if octal is not None:
            return chr(int(octal, 8) & 0xFF)
        if newline is not None:
            return ""
        # Unknown escapes drop the backslash
        return _SIMPLE_ESCAPES.get(char, char)

    return ESCAPE_PATTERN.sub(_replace, value)


def _printable_text(raw: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", NON_PRINTABLE_PATTERN.sub(" ", raw)).strip()


def extract_text_blocks(text: str) -> List[str]:
    """Collects shown strings from every BT...ET text object, in document order."""
    parts: List[str] = []
    for block_match in TEXT_BLOCK_PATTERN.finditer(text):
        block = block_match.group(1)

        for tj_match in TJ_PATTERN.finditer(block):
            decoded = decode_pdf_string(tj_match.group(1))
            if decoded.strip():
                parts.append(decoded)

        for array_match in TJ_ARRAY_PATTERN.finditer(block):
            line_text = [
                decode_pdf_string(m.group(1))
                for m in ARRAY_STRING_PATTERN.finditer(array_match.group(1))
            ]
            line_text = [s for s in line_text if s]
            if line_text:
                parts.append("".join(line_text))
    return parts


def extract_stream_text(text: str) -> List[str]:
    """Readable word runs from raw stream bodies, for PDFs without usable text objects."""
    parts: List[str] = []
    for stream_match in STREAM_PATTERN.finditer(text):
        readable = _printable_text(stream_match.group(1))
        if len(readable) <= MIN_STREAM_TEXT_LENGTH:
            continue
        words = [
            w
            for w in readable.split(" ")
            if len(w) >= 2
            and re.search(r"[a-zA-Z]", w)
            and not re.fullmatch(r"[0-9.]+", w)
        ]
        if len(words) > MIN_STREAM_WORDS:
            parts.append(" ".join(words))
    return parts


def _join_parts(parts: List[str]) -> str:
    joined = WHITESPACE_PATTERN.sub(" ", " ".join(parts))
    return CAMEL_BOUNDARY_PATTERN.sub(r"\1 \2", joined).strip()


def extract_text_from_pdf(data: bytes) -> str:
    try:
        text = data.decode("latin-1")

        block_parts = extract_text_blocks(text)
        result = _join_parts(block_parts)

        if len(result) < MIN_TEXT_LENGTH:
            result = _join_parts(block_parts + extract_stream_text(text))

        # Last resort: any word-like token anywhere in the file
        if len(result) < MIN_TEXT_LENGTH:
            meaningful = " ".join(
                word
                for word in _printable_text(text).split()
                if len(word) >= 3 and re.search(r"[a-zA-Z]{2,}", word)
            )
            if len(meaningful) > len(result):
                result = meaningful

        return result
    except Exception as e:
        logger.exception("PDF extraction error: %s", e)
        return ""
