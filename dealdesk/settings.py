import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="DEALDESK_", extra="ignore")

    db_url: str = "sqlite:///dealdesk.db"

    storage_backend: str = "local"
    storage_local_path: str = "./storage"
    storage_prefix: str = "deals"

    s3_bucket: str = ""
    s3_region: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_endpoint_url: str = ""
    s3_presigned_expiry: int = 604800  # 7 days in seconds

    log_level: str = "INFO"
    log_json: bool = False
    log_file: str = ""  # keeps log lines out of the interactive menus

    currency_symbol: str = "₪"
    page_size: int = 10


settings = Settings()
