from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "JSON Post Type"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    site_url: str = "http://localhost:8000"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./json_post_type.db"

    # Security settings
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Bootstrap administrator (created at startup when both are set)
    admin_email: str | None = None
    admin_password: str | None = None

    # REST exposure
    rest_prefix: str = "/wp-json"
    rest_namespace: str = "wp/v2"
    rest_response_shape: Literal["document", "wrapped"] = "document"
    validate_json_on_write: bool = False

    # Capability grants
    capability_roles: list[str] = ["administrator"]
    grant_capabilities_on_startup: bool = False

    # Editor assets
    jsoneditor_script_url: str = "https://cdn.jsdelivr.net/npm/jsoneditor@9.10.5/dist/jsoneditor.min.js"
    jsoneditor_style_url: str = "https://cdn.jsdelivr.net/npm/jsoneditor@9.10.5/dist/jsoneditor.min.css"

    # Plugins loaded in addition to the built-in one, as "package.module:ClassName"
    extra_plugins: list[str] = []

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # i18n
    default_locale: str = "en"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
