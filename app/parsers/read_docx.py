import html
import io
import logging
import re
import zipfile

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
PARAGRAPH_END = "</w:p>"
# <w:t> and <w:t xml:space="preserve">, but not <w:tab/> or <w:tbl>
TEXT_RUN_PATTERN = re.compile(r"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")


def extract_text_from_docx(data: bytes) -> str:
    """
    Reads the body text of a DOCX file without a DOCX library: unzip, take
    word/document.xml and scan its <w:t> runs. Runs of one paragraph are joined
    directly; each paragraph ends with a newline.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            if DOCUMENT_PART not in zf.namelist():
                logger.warning("No %s found in DOCX", DOCUMENT_PART)
                return ""
            document_xml = zf.read(DOCUMENT_PART).decode("utf-8", errors="replace")
    except Exception as e:
        # Not a zip, truncated archive or corrupt deflate data
        logger.error("DOCX extraction error: %s", e)
        return ""

    full_text = ""
    for paragraph in document_xml.split(PARAGRAPH_END):
        runs = [html.unescape(run) for run in TEXT_RUN_PATTERN.findall(paragraph) if run]
        if runs:
            full_text += "".join(runs) + "\n"

    logger.info("DOCX extracted text length: %d", len(full_text))
    return full_text.strip()
