from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

# 저장소 루트의 .env (config.py → polyglai → root)
_ROOT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILE = _ROOT_DIR / ".env"


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    supabase_service_role_key: str = ""

    @model_validator(mode="after")
    def resolve_service_key(self) -> "Settings":
        """SUPABASE_SERVICE_ROLE_KEY 우선, fallback SUPABASE_SERVICE_KEY."""
        if self.supabase_service_role_key:
            self.supabase_service_key = self.supabase_service_role_key
        return self

    # Microsoft Translator (Azure Cognitive Services)
    azure_translator_key: str = ""
    azure_translator_region: str = ""
    azure_translator_endpoint: str = "https://api.cognitive.microsofttranslator.com"
    azure_translator_timeout_s: float = 10.0

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8000

    # CORS
    allowed_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
        ],
        description="CORS allowed origins",
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",")]
        return v

    # Moderation
    moderation_enabled: bool = True
    max_text_length: int = 10_000
    moderation_table: str = "profanity_records"
    recorder_queue_size: int = 1000
    recorder_shutdown_timeout_s: float = 5.0
    stats_scan_limit: int = 1000  # 집계 시 최근 N개 레코드만 스캔
    high_risk_threshold: int = 10

    # File extraction
    extract_max_chars: int = 1000
    extract_max_bytes: int = 5_242_880  # 5MB

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    model_config = {
        "env_file": str(_ENV_FILE),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
