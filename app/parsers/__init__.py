import logging

from app.parsers.read_pdf import extract_text_from_pdf
from app.parsers.read_docx import extract_text_from_docx
from app.parsers.read_doc import extract_text_from_doc

logger = logging.getLogger(__name__)

_EXTRACTORS = {
    "pdf": extract_text_from_pdf,
    "docx": extract_text_from_docx,
    "doc": extract_text_from_doc,
}


def file_extension_for(path: str) -> str:
    # Files without an extension are treated as PDF
    if "." not in path:
        return "pdf"
    return path.rsplit(".", 1)[-1].lower() or "pdf"


def extract_text_from_file(data: bytes, extension: str) -> str:
    """Raw text of a CV file, picked by extension. Unknown formats give ''."""
    extractor = _EXTRACTORS.get(extension)
    if extractor is None:
        logger.warning("No text extractor for file type: %s", extension)
        return ""

    text = extractor(data)
    logger.info("%s extracted text length: %d", extension.upper(), len(text))
    return text
