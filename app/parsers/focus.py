from typing import Optional

# Checked in this order; the first header present wins, not the earliest one
START_MARKERS = [
    "WORK EXPERIENCE",
    "PROFESSIONAL EXPERIENCE",
    "EXPERIENCE",
    "EMPLOYMENT HISTORY",
]

END_MARKERS = [
    "EDUCATION",
    "CERTIFICATIONS",
    "SKILLS",
    "PROJECTS",
    "LANGUAGES",
    "ACHIEVEMENTS",
    "INTERESTS",
]

# Skip past the start header itself before looking for the next section
END_SEARCH_OFFSET = 20
MAX_SECTION_CHARS = 25000
FALLBACK_PREFIX_CHARS = 20000


def get_work_experience_focused_text(full_text: Optional[str]) -> str:
    """
    Returns the work-experience section of a CV, bounded by the next known
    section header. Without an experience header, the first chunk of the text
    is returned since it usually holds the experience anyway.
    """
    text = str(full_text or "")
    upper = text.upper()

    start = -1
    for marker in START_MARKERS:
        idx = upper.find(marker)
        if idx != -1:
            start = idx
            break

    if start == -1:
        return text[:FALLBACK_PREFIX_CHARS]

    end = len(upper)
    for marker in END_MARKERS:
        idx = upper.find(marker, start + END_SEARCH_OFFSET)
        if idx != -1 and idx < end:
            end = idx

    return text[start:end][:MAX_SECTION_CHARS]
