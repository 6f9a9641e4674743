import re

from app.constants import MIME_TYPES

MIN_READABLE_LENGTH = 100
MIN_READABLE_RATIO = 0.4
SNIPPET_LENGTH = 500

DISALLOWED_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9\s.,;:!?@#$%&*()\-]")
COMMON_CV_WORDS_PATTERN = re.compile(
    r"\b(experience|education|skills|work|company|university|degree|manager|developer|engineer|analyst)\b",
    re.IGNORECASE,
)

NO_TEXT_SNIPPET = "[No text extracted - PDF may be image-based]"
IMAGE_BASED_SNIPPET = (
    "[Text extraction failed - PDF appears to be image-based. "
    "Please upload a DOCX file or a PDF with selectable text.]"
)


def is_text_readable(text: str) -> bool:
    """
    True when extracted text looks like a real CV rather than binary noise:
    enough allowed characters and at least one common résumé word.
    """
    if not text or len(text) < MIN_READABLE_LENGTH:
        return False
    readable = DISALLOWED_CHARS_PATTERN.sub("", text)
    ratio = len(readable) / len(text)
    has_common_words = COMMON_CV_WORDS_PATTERN.search(text) is not None
    return ratio > MIN_READABLE_RATIO and has_common_words


def create_readable_snippet(text: str) -> str:
    if not text:
        return NO_TEXT_SNIPPET
    if not is_text_readable(text):
        return IMAGE_BASED_SNIPPET
    return text[:SNIPPET_LENGTH]


def mime_type_for(extension: str) -> str:
    return MIME_TYPES.get(extension, MIME_TYPES["doc"])
