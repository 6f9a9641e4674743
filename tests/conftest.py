import io
import struct
import zipfile
from typing import List

import pytest

DOCUMENT_PART = "word/document.xml"
DOCUMENT_XML_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>{body}</w:body></w:document>"
)


def build_docx(paragraphs: List[List[str]], compression: int = zipfile.ZIP_STORED) -> bytes:
    """Minimal DOCX archive: one <w:p> per entry, one <w:r><w:t> per run."""
    body = "".join(
        "<w:p>"
        + "".join(f'<w:r><w:t xml:space="preserve">{run}</w:t></w:r>' for run in runs)
        + "</w:p>"
        for runs in paragraphs
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr(DOCUMENT_PART, DOCUMENT_XML_TEMPLATE.format(body=body))
    return buffer.getvalue()


def build_corrupt_docx(paragraphs: List[List[str]]) -> bytes:
    """Deflated DOCX with a stretch of the document.xml payload bit-flipped."""
    data = bytearray(build_docx(paragraphs, compression=zipfile.ZIP_DEFLATED))
    with zipfile.ZipFile(io.BytesIO(bytes(data))) as zf:
        offset = zf.getinfo(DOCUMENT_PART).header_offset
    # Local file header: 30 fixed bytes, then file name and extra field
    name_length, extra_length = struct.unpack("<HH", data[offset + 26 : offset + 30])
    payload_start = offset + 30 + name_length + extra_length
    for i in range(payload_start + 5, payload_start + 25):
        data[i] ^= 0xFF
    return bytes(data)


@pytest.fixture
def make_docx():
    return build_docx


@pytest.fixture
def make_corrupt_docx():
    return build_corrupt_docx


@pytest.fixture
def sample_profile():
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "+12345678901",
        "city": "London, Remote",
        "linkedin": "https://linkedin.com/in/ada",
        "summary": "Engineer.",
        "workExperience": [
            {
                "company": "Analytical Engines",
                "title": "Engineer",
                "dates": "1842-1843",
                "bullets": ["- Wrote the first program"],
            }
        ],
        "education": [
            {"school": "Home", "degree": "Mathematics", "dates": "1835", "gpa": ""}
        ],
        "skills": ["Python", "Math"],
        "certifications": ["CERT"],
    }
