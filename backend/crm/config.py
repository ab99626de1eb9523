from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Real Estate CRM"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Document store
    store_backend: Literal["sql", "firestore"] = "sql"
    database_url: str = "sqlite:///./crm.db"
    firestore_project_id: str = ""
    # Documents live under artifacts/{app_id}/users/{user_id}/{collection}
    app_id: str = "default-app-id"

    # Requests without an X-User-Id header fall back to this partition
    allow_anonymous: bool = True
    anonymous_user_id: str = "anonymous"

    llm_provider: Literal["gemini", "claude", "openai"] = "gemini"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    llm_temperature: float = 0.1
    llm_timeout_seconds: float = 60.0

    notification_seconds: float = 5.0

    max_file_size_mb: int = 10
    allowed_extensions: str = ".xlsx,.xls"
    export_filename: str = "danh_sach_bat_dong_san.xlsx"
    export_sheet_name: str = "Bất động sản"

    cors_origins: str = "http://localhost:5173"
    # Page URL embedded in share links when the client does not send one
    public_app_url: str = "http://localhost:5173"

    model_config = {"env_file": ".env"}


settings = Settings()
