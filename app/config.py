from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()

class Settings(BaseSettings):
    supabase_url: str = ""
    supabase_anon_key: str = ""
    cv_bucket: str = "cvs"

    # Server-side fallback key when a profile has no OpenAI key of its own
    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o-mini"
    kimi_api_url: str = "https://api.moonshot.ai/v1/chat/completions"
    kimi_model: str = "kimi-k2-0711-preview"

    ai_request_timeout: float = 120.0
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
