from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    llm_provider: str = "google"
    chat_model: str = "gemini-2.5-flash"
    vision_model: str = "gemini-2.5-flash-image"
    google_api_key: str = ""
    openai_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    chat_temperature: float = 0.4
    chat_max_output_tokens: int = 3000
    vision_temperature: float = 0.4
    vision_max_output_tokens: int = 4096
    web_search_enabled: bool = True

    admin_email: str = "admin@fitboost.app"
    storage_backend: str = "json"
    data_dir: Path = DEFAULT_DATA_DIR
    login_delay_seconds: float = 0.8
    language: str = "pt"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
