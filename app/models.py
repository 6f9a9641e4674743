from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# --- Profile-only résumé document ---
class ContactInfo(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""


class JobEntry(BaseModel):
    company: str = ""
    title: str = ""
    title_line: str = Field(alias="titleLine", default="")  # Pre-formatted "title | dates"
    dates: str = ""
    location: str = ""
    bullets: List[str] = []

    class Config:
        populate_by_name = True


class ProjectEntry(BaseModel):
    name: str = ""
    dates: str = ""
    bullets: List[str] = []


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    dates: str = ""
    gpa: str = ""


class ParseMetadata(BaseModel):
    parsed_at: str = Field(alias="parsedAt")
    parser: str
    source: str
    ats_version: str = Field(alias="atsVersion")

    class Config:
        populate_by_name = True


class ParsedResume(BaseModel):
    contact: ContactInfo = Field(default_factory=ContactInfo)
    summary: str = ""
    experience: List[JobEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: str = ""
    certifications: str = ""
    metadata: Optional[ParseMetadata] = None


class ProfileParseResult(BaseModel):
    success: bool
    data: Optional[ParsedResume] = None
    timing: Optional[float] = None
    source: Optional[str] = None
    error: Optional[str] = None


# --- CV upload flow ---
class ParseCVRequest(BaseModel):
    cv_file_path: Optional[str] = Field(alias="cvFilePath", default=None)
    debug: bool = False

    class Config:
        populate_by_name = True


class AISettings(BaseModel):
    """AI columns of a `profiles` row."""

    openai_api_key: Optional[str] = None
    kimi_api_key: Optional[str] = None
    preferred_ai_provider: Optional[str] = None
    openai_enabled: Optional[bool] = None
    kimi_enabled: Optional[bool] = None


class AIProvider(BaseModel):
    name: str
    api_url: str
    model: str
    api_key: str


class ParseDebugInfo(BaseModel):
    extracted_text_length: int = Field(alias="extractedTextLength")
    extracted_text_snippet: str = Field(alias="extractedTextSnippet")
    file_extension: str = Field(alias="fileExtension")
    used_input_type: str = Field(alias="usedInputType")
    focused_text_length: int = Field(alias="focusedTextLength", default=0)
    provider: Optional[str] = None

    class Config:
        populate_by_name = True


class CVExtractionJob(BaseModel):
    """Transient state of one upload request. Never persisted."""

    file_path: str
    file_extension: str
    mime_type: str
    size: int = 0
    extracted_text: str = ""
    text_is_readable: bool = False
    focused_text: str = ""
    used_input_type: str = ""
    provider: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class ParseCVResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    debug: Optional[ParseDebugInfo] = None
    error: Optional[str] = None
