"""Application settings using Pydantic Settings."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


def find_and_load_env_file():
    """Find and load .env file in current directory or parent directories."""
    search_paths = [
        Path.cwd(),
        Path(__file__).parent.parent.parent.parent.parent,  # Project root
    ]

    for start_path in search_paths:
        current = start_path.resolve()
        # Check current directory and up to 3 levels up
        for _ in range(4):
            env_path = current / ".env"
            if env_path.exists():
                load_dotenv(env_path, override=False)
                return str(env_path)
            parent = current.parent
            if parent == current:  # Reached root
                break
            current = parent
    return None


# Load .env file before Settings class is defined
find_and_load_env_file()


class Settings(BaseSettings):
    """Application configuration settings."""

    # Groq (OpenAI-compatible endpoint), the default provider
    groq_api_key: Optional[str] = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama3-8b-8192"
    # OpenAI
    openai_api_key: Optional[str] = None
    model_name: Optional[str] = None
    # Gemini (requires the gemini extra)
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None
    # Local LLM support (OpenAI-compatible API)
    llm_url: Optional[str] = None
    model: Optional[str] = None

    temperature: float = 0.1
    max_tokens: int = 1000

    # LLM Timeout Configuration (in seconds)
    llm_timeout: float = 30.0
    llm_max_retries: int = 1  # 1 = single attempt, fall back immediately
    llm_retry_delay: float = 1.0

    # Request limits
    max_input_length: int = 1000
    max_conversation_history: int = 10
    context_history_size: int = 3

    # Sessions and result cache (seconds)
    cache_ttl: int = 3600
    cache_max_size: int = 256
    session_max_age: float = 24 * 60 * 60
    session_sweep_interval: float = 60 * 60

    # Logging Configuration
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=None,  # We load it manually with dotenv
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    def __init__(self, **kwargs):
        """Initialize settings and create the log directory if needed."""
        find_and_load_env_file()
        super().__init__(**kwargs)
        if self.log_file:
            self.log_file = Path(self.log_file)
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
