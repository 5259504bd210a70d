from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./erp_integration.db"

    # ERP exchange files
    products_json_path: str = "var/import/erp_products.json"
    orders_json_path: str = "var/export/erp_orders.json"
    default_source_code: str = "default"

    # Logging
    log_file: str = "var/log/erp_integration.log"
    log_level: str = "INFO"

    # Celery
    celery_broker_url: str = "redis://redis:6379/0"
    celery_result_backend: str = "redis://redis:6379/0"
    celery_task_serializer: str = "json"
    celery_result_serializer: str = "json"
    celery_accept_content: List[str] = ["json"]
    celery_timezone: str = "UTC"
    celery_enable_utc: bool = True
    celery_task_always_eager: bool = False

    model_config = SettingsConfigDict(env_prefix="ERP_", env_file=".env", extra="ignore")


settings = Settings()
