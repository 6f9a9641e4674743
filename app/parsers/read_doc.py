import re

NON_PRINTABLE_PATTERN = re.compile(r"[^\x20-\x7E\n\r]")


def extract_text_from_doc(data: bytes) -> str:
    """Legacy Word binary: no structure is parsed, printable bytes are kept."""
    raw_text = data.decode("latin-1")
    return re.sub(r"\s+", " ", NON_PRINTABLE_PATTERN.sub(" ", raw_text)).strip()
