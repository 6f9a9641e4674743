"""
Profile-only résumé extraction.

Builds an ATS-friendly résumé document purely from the fields of a profile
record. Work history comes from the profile's work experience list and nowhere
else: a profile without one yields an empty experience section.
"""

import datetime
import logging
import re
import time
from typing import Any, Dict, List, Mapping

from app.constants import ATS_VERSION, PROFILE_PARSER_NAME, PROFILE_SOURCE
from app.models import (
    ContactInfo,
    EducationEntry,
    JobEntry,
    ParsedResume,
    ParseMetadata,
    ProfileParseResult,
    ProjectEntry,
)

logger = logging.getLogger(__name__)

# --- Regex Patterns ---
PHONE_STRIP_PATTERN = re.compile(r"[^\d+]")
# "+44 7911..." / "+1-234..." / "+1 (234)...": the separator tells us the country code
PHONE_EXPLICIT_COUNTRY_PATTERN = re.compile(r"^\s*\+(\d{1,3})[\s.\-()]+\d")
PHONE_GREEDY_PATTERN = re.compile(r"^\+(\d{1,3})(\d+)$")
NATIONAL_NUMBER_DIGITS = 10

LOCATION_MARKERS = r"(?:fully remote|remote|work from home|wfh|virtual)"
BRACKETED_MARKER_PATTERN = re.compile(
    rf"\s*[\(\[]\s*{LOCATION_MARKERS}\s*[\)\]]\s*", re.IGNORECASE
)
MARKER_PATTERN = re.compile(rf"\b{LOCATION_MARKERS}\b", re.IGNORECASE)
SEPARATOR = r"(?:\||,|/|–|-)"
DOUBLE_SEPARATOR_PATTERN = re.compile(rf"\s*{SEPARATOR}\s*{SEPARATOR}\s*")
TRAILING_SEPARATOR_PATTERN = re.compile(rf"(?:\s*{SEPARATOR})+\s*$")
LEADING_SEPARATOR_PATTERN = re.compile(rf"^\s*(?:{SEPARATOR}\s*)+")
WRAPPED_PATTERN = re.compile(r"^[\(\[]\s*([^\(\)\[\]]*?)\s*[\)\]]$")

DASH_PATTERN = re.compile(r"\s*[-‐-―]+\s*")
BULLET_MARKER_PATTERN = re.compile(r"^\s*[-•*▪▸►◦‣]\s*")


def _first(record: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """First truthy value among alias keys."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return default


def _text(value: Any) -> str:
    return str(value).strip() if value else ""


# ============ FIELD NORMALIZERS ============
def format_phone(phone: str) -> str:
    if not phone:
        return ""

    cleaned = PHONE_STRIP_PATTERN.sub("", phone)
    if not cleaned.startswith("+"):
        return phone

    digits = cleaned[1:]
    if not digits.isdigit():
        return phone

    explicit = PHONE_EXPLICIT_COUNTRY_PATTERN.match(phone)
    if explicit:
        country = explicit.group(1)
        return f"+{country} {digits[len(country):]}"

    if NATIONAL_NUMBER_DIGITS < len(digits) <= NATIONAL_NUMBER_DIGITS + 3:
        split = len(digits) - NATIONAL_NUMBER_DIGITS
        return f"+{digits[:split]} {digits[split:]}"

    match = PHONE_GREEDY_PATTERN.match(cleaned)
    if match:
        return f"+{match.group(1)} {match.group(2)}"
    return phone


def clean_location(location: str) -> str:
    """Drops remote/WFH markers and tidies the separators they leave behind."""
    if not location:
        return ""

    cleaned = BRACKETED_MARKER_PATTERN.sub(" ", location)
    cleaned = MARKER_PATTERN.sub("", cleaned)
    cleaned = DOUBLE_SEPARATOR_PATTERN.sub(" | ", cleaned)
    cleaned = TRAILING_SEPARATOR_PATTERN.sub("", cleaned)
    cleaned = LEADING_SEPARATOR_PATTERN.sub("", cleaned)
    cleaned = re.sub(r"\s{2,}", " ", cleaned).strip()

    wrapped = WRAPPED_PATTERN.match(cleaned)
    if wrapped:
        cleaned = wrapped.group(1).strip()
    return cleaned


def normalize_dates(date_str: Any) -> str:
    """'2019-2021' / '2019--2021' / '2019 — 2021' -> '2019 – 2021'."""
    if not date_str:
        return ""
    return DASH_PATTERN.sub(" – ", str(date_str))


def clean_bullet(bullet: Any) -> str:
    return BULLET_MARKER_PATTERN.sub("", str(bullet)).strip()


def _clean_bullets(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [line for line in raw.split("\n") if line.strip()]
    elif not isinstance(raw, list):
        raw = [raw]
    cleaned = [clean_bullet(b) for b in raw if b is not None]
    return [b for b in cleaned if b]


def _join_names(raw: Any) -> str:
    if isinstance(raw, list):
        names = []
        for item in raw:
            if isinstance(item, dict):
                item = item.get("name") or ""
            if item:
                names.append(str(item))
        return ", ".join(names)
    if isinstance(raw, str):
        return raw
    return ""


# ============ SECTION EXTRACTORS ============
def extract_contact_info(profile: Mapping[str, Any]) -> ContactInfo:
    first_name = _first(profile, "firstName", "first_name")
    last_name = _first(profile, "lastName", "last_name")

    return ContactInfo(
        name=f"{first_name} {last_name}".strip(),
        email=_text(_first(profile, "email")),
        phone=format_phone(str(_first(profile, "phone"))),
        location=clean_location(str(_first(profile, "city", "location"))),
        linkedin=_text(_first(profile, "linkedin")),
        github=_text(_first(profile, "github")),
        portfolio=_text(_first(profile, "portfolio")),
    )


def extract_summary(profile: Mapping[str, Any]) -> str:
    return _text(_first(profile, "summary", "professionalSummary", "profile"))


def _job_dates(job: Mapping[str, Any]) -> str:
    dates = _first(job, "dates", "duration")
    if not dates and (job.get("startDate") or job.get("endDate")):
        start = job.get("startDate") or ""
        end = job.get("endDate") or "Present"
        dates = f"{start} - {end}" if start else end
    return normalize_dates(dates)


def parse_profile_experience(work_experience: List[Mapping[str, Any]]) -> List[JobEntry]:
    jobs = []
    for job in work_experience:
        if not isinstance(job, dict):
            continue
        # Company, title and dates are taken exactly as the profile has them
        company = _text(_first(job, "company", "organization"))
        title = _text(_first(job, "title", "position", "role"))
        dates = _job_dates(job)
        bullets = _clean_bullets(_first(job, "bullets", "achievements", "responsibilities"))

        jobs.append(
            JobEntry(
                company=company,
                title=title,
                title_line=f"{title} | {dates}" if dates else title,
                dates=dates,
                location=_text(_first(job, "location")),
                bullets=bullets,
            )
        )
    return jobs


def extract_projects(profile: Mapping[str, Any]) -> List[ProjectEntry]:
    projects = _first(profile, "relevant_projects", "relevantProjects", "projects", default=[])
    if not isinstance(projects, list):
        return []

    entries = []
    for project in projects:
        if not isinstance(project, dict):
            continue
        entries.append(
            ProjectEntry(
                name=_text(_first(project, "name", "title")),
                dates=_job_dates(project),
                bullets=_clean_bullets(
                    _first(project, "bullets", "achievements", "description")
                ),
            )
        )
    return entries


def extract_education(profile: Mapping[str, Any]) -> List[EducationEntry]:
    education = profile.get("education") or []
    if not isinstance(education, list):
        return []

    return [
        EducationEntry(
            institution=_text(_first(edu, "institution", "school", "university")),
            degree=_text(_first(edu, "degree")),
            dates=_text(_first(edu, "dates", "graduationDate")),
            gpa=_text(_first(edu, "gpa")),
        )
        for edu in education
        if isinstance(edu, dict)
    ]


def extract_skills(profile: Mapping[str, Any]) -> str:
    return _join_names(profile.get("skills") or [])


def extract_certifications(profile: Mapping[str, Any]) -> str:
    return _join_names(profile.get("certifications") or [])


def extract_technical_experience(profile: Mapping[str, Any]) -> ParsedResume:
    data = ParsedResume(
        contact=extract_contact_info(profile),
        summary=extract_summary(profile),
    )

    # No fallback to any other source of work history
    work_experience = _first(profile, "workExperience", "work_experience", default=[])
    if isinstance(work_experience, list) and work_experience:
        data.experience = parse_profile_experience(work_experience)
    else:
        logger.warning("[ProfileOnlyParser] No work experience found in profile data")

    data.projects = extract_projects(profile)
    data.education = extract_education(profile)
    data.skills = extract_skills(profile)
    data.certifications = extract_certifications(profile)
    return data


def enhance_for_ats(data: ParsedResume) -> ParsedResume:
    enhanced = data.model_copy()
    enhanced.metadata = ParseMetadata(
        parsed_at=datetime.datetime.now(datetime.timezone.utc).isoformat(),
        parser=PROFILE_PARSER_NAME,
        source=PROFILE_SOURCE,
        ats_version=ATS_VERSION,
    )
    return enhanced


# ============ ENTRY POINTS ============
def parse_from_profile_page(profile: Dict[str, Any]) -> ProfileParseResult:
    start_time = time.perf_counter()
    logger.info("[ProfileOnlyParser] Parsing profile page data...")

    try:
        parsed = extract_technical_experience(profile)
        enhanced = enhance_for_ats(parsed)

        timing = (time.perf_counter() - start_time) * 1000
        logger.info("[ProfileOnlyParser] Profile parsed in %.0fms", timing)
        return ProfileParseResult(
            success=True, data=enhanced, timing=timing, source=PROFILE_SOURCE
        )
    except Exception as e:
        logger.exception("[ProfileOnlyParser] Error parsing profile")
        return ProfileParseResult(success=False, error=str(e), data=None)


def generate_ats_text(profile: Dict[str, Any]) -> str:
    """Plain-text résumé in a fixed, ATS-safe block order."""
    parsed = extract_technical_experience(profile)
    contact = parsed.contact
    lines: List[str] = []

    lines.append(contact.name.upper())

    contact_parts = [p for p in (contact.phone, contact.email, contact.location) if p]
    if contact_parts:
        relocation = " | Open to relocation" if contact.location else ""
        lines.append(" | ".join(contact_parts) + relocation)

    links = [l for l in (contact.linkedin, contact.github, contact.portfolio) if l]
    if links:
        lines.append(" | ".join(links))

    lines.append("")

    if parsed.summary:
        lines.append("PROFESSIONAL SUMMARY")
        lines.append(parsed.summary)
        lines.append("")

    if parsed.experience:
        lines.append("WORK EXPERIENCE")
        for job in parsed.experience:
            lines.append(job.company)
            lines.append(job.title_line)
            lines.extend(f"• {bullet}" for bullet in job.bullets)
            lines.append("")

    if parsed.projects:
        lines.append("PROJECTS")
        for project in parsed.projects:
            lines.append(f"{project.name} | {project.dates}" if project.dates else project.name)
            lines.extend(f"• {bullet}" for bullet in project.bullets)
            lines.append("")

    # Education without dates to prevent age bias
    if parsed.education:
        lines.append("EDUCATION")
        for edu in parsed.education:
            parts = [edu.degree, edu.institution]
            if edu.gpa:
                parts.append(edu.gpa)
            lines.append(" | ".join(parts))
        lines.append("")

    if parsed.skills:
        lines.append("SKILLS")
        lines.append(parsed.skills)
        lines.append("")

    if parsed.certifications:
        lines.append("CERTIFICATIONS")
        lines.append(parsed.certifications)

    return "\n".join(lines)
