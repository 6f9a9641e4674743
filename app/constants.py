CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

MIME_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
}

PROFILE_AI_SETTINGS_COLUMNS = (
    "openai_api_key, kimi_api_key, preferred_ai_provider, openai_enabled, kimi_enabled"
)

# Input strategies handed to the model
FOCUSED_TEXT = "focused_text"
EXTRACTED_TEXT = "extracted_text"
BASE64_SNIPPET = "base64_snippet"

MIN_MODEL_TEXT_LENGTH = 200
MAX_EXTRACTED_TEXT_CHARS = 30000
BASE64_SOURCE_BYTES = 50000
MAX_BASE64_CHARS = 40000

PROFILE_PARSER_NAME = "ProfileOnlyParser"
PROFILE_SOURCE = "profile_page_only"
ATS_VERSION = "1.0.0"
