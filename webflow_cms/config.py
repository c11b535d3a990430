from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import Optional

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Webflow CMS Manager"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    port: int = 5000

    # Webflow settings
    webflow_access_token: Optional[str] = None
    webflow_site_id: Optional[str] = None
    webflow_api_base_url: str = "https://api.webflow.com/v2"
    webflow_legacy_api_base_url: str = "https://api.webflow.com"
    webflow_accept_version: str = "1.0.0"
    request_timeout_seconds: float = 10.0
    publish_items_live: bool = True

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    # CORS settings
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
