import base64
from typing import List

from app.constants import (
    BASE64_SNIPPET,
    BASE64_SOURCE_BYTES,
    EXTRACTED_TEXT,
    FOCUSED_TEXT,
    MAX_BASE64_CHARS,
    MAX_EXTRACTED_TEXT_CHARS,
    MIN_MODEL_TEXT_LENGTH,
)

CV_EXTRACTION_SYSTEM_PROMPT = """You are an expert CV/Resume parser. Extract structured information from the provided CV content and return it as a JSON object.

Important rules:
- Preserve company names and job titles exactly as written in the CV.
- Do NOT swap company/title.
- If the CV uses headings (e.g. starting with "#"), treat them as section markers, not part of the values.

Extract the following fields (use null if not found):
- first_name: string
- last_name: string
- email: string
- phone: string
- city: string
- country: string
- linkedin: string (full URL if possible)
- github: string (full URL if possible)
- portfolio: string (full URL if possible)
- total_experience: string (e.g., "5+ years")
- highest_education: string (e.g., "Master's in Computer Science")
- current_salary: string (if mentioned)
- expected_salary: string (if mentioned)
- skills: array of objects with {name: string, years: number, category: "technical" | "soft"}
- certifications: array of strings
- work_experience: array of objects with {company: string, title: string, startDate: string, endDate: string, description: string, bullets: string[]}
  - bullets should be an array of individual achievement/responsibility strings
  - description should be a brief role summary
- education: array of objects with {institution: string, degree: string, field: string, startDate: string, endDate: string}
- languages: array of objects with {language: string, proficiency: "native" | "fluent" | "conversational" | "basic"}
- cover_letter: string (a brief professional summary if available)

Return ONLY valid JSON, no markdown or explanation."""

WORK_EXPERIENCE_SYSTEM_PROMPT = """You extract ONLY work experience entries from CV text.

Rules:
- Output ONLY valid JSON.
- Return an object with exactly: {"work_experience": [...]}
- Each item: {"company": string, "title": string, "startDate": string|null, "endDate": string|null, "description": string, "bullets": string[]}
- bullets must be an array of individual achievement/responsibility strings (one per bullet point).
- description should be a brief role summary or empty string.
- Preserve company names exactly (including "formerly" notes).
- Do not invent roles. If unsure, include the closest matching text from the CV."""


def choose_input_type(focused_text: str, extracted_text: str, text_is_readable: bool) -> str:
    if focused_text and len(focused_text.strip()) > MIN_MODEL_TEXT_LENGTH:
        return FOCUSED_TEXT
    if extracted_text and text_is_readable and len(extracted_text.strip()) > MIN_MODEL_TEXT_LENGTH:
        return EXTRACTED_TEXT
    return BASE64_SNIPPET


def build_base64_snippet(data: bytes) -> str:
    return base64.b64encode(data[:BASE64_SOURCE_BYTES]).decode("ascii")[:MAX_BASE64_CHARS]


def build_model_input(
    input_type: str, focused_text: str, extracted_text: str, data: bytes, mime_type: str
) -> str:
    if input_type == FOCUSED_TEXT:
        return f"CV_TEXT (focused on WORK EXPERIENCE):\n{focused_text}"
    if input_type == EXTRACTED_TEXT:
        return f"CV_TEXT (extracted):\n{extracted_text[:MAX_EXTRACTED_TEXT_CHARS]}"
    return f"CV_BASE64_SNIPPET ({mime_type}):\n{build_base64_snippet(data)}"


def build_extraction_messages(model_input: str) -> List[dict]:
    return [
        {"role": "system", "content": CV_EXTRACTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f"Parse this CV content and extract structured data:\n\n{model_input}",
        },
    ]


def build_work_experience_messages(model_input: str) -> List[dict]:
    return [
        {"role": "system", "content": WORK_EXPERIENCE_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f"Extract work experience from this CV section:\n\n{model_input}",
        },
    ]
