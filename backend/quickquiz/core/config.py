from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(default="development", validation_alias="APP_ENV")

    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    database_host: str = Field(default="localhost", validation_alias="DATABASE_HOST")
    database_port: int = Field(default=5432, validation_alias="DATABASE_PORT")
    database_name: str = Field(default="quickquiz", validation_alias="DATABASE_NAME")
    database_username: str = Field(default="quickquiz", validation_alias="DATABASE_USERNAME")
    database_password: str = Field(default="quickquiz", validation_alias="DATABASE_PASSWORD")

    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_pool_recycle_seconds: int = Field(default=3600, validation_alias="DB_POOL_RECYCLE_SECONDS")

    api_port: int = Field(default=8080, validation_alias="API_PORT")
    cors_allow_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ALLOW_ORIGINS")

    # "db" keeps the question bank in our own database, "cms" talks to the CMS REST API.
    content_store: str = Field(default="db", validation_alias="CONTENT_STORE")

    cms_base_url: str = Field(default="http://localhost:1337", validation_alias="CMS_BASE_URL")
    cms_api_token: str | None = Field(default=None, validation_alias="CMS_API_TOKEN")
    cms_timeout_seconds: float = Field(default=15.0, validation_alias="CMS_TIMEOUT_SECONDS")
    cms_page_size: int = Field(default=100, validation_alias="CMS_PAGE_SIZE")

    import_data_dir: str = Field(default="data", validation_alias="IMPORT_DATA_DIR")

    @property
    def effective_database_url(self) -> str:
        url = (self.database_url or "").strip()
        if url:
            return url
        return (
            f"postgresql+psycopg://{self.database_username}:{self.database_password}"
            f"@{self.database_host}:{int(self.database_port)}/{self.database_name}"
        )


settings = Settings()


def _is_prod() -> bool:
    return (settings.app_env or "").strip().lower() in {"prod", "production"}


if _is_prod():
    db_url_l = settings.effective_database_url.strip().lower()
    if any(s in db_url_l for s in {"//quickquiz:quickquiz@", "//postgres:postgres@", "//strapi:strapi@"}):
        raise RuntimeError("DATABASE_URL must not use default credentials in production")

    if (settings.content_store or "").strip().lower() == "cms" and not (settings.cms_api_token or "").strip():
        raise RuntimeError("CMS_API_TOKEN must be set when CONTENT_STORE=cms in production")
