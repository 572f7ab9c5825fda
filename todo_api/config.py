from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Connection string, highest priority unless it is an unresolved placeholder
    database_url: str | None = Field(
        None, validation_alias=AliasChoices("MYSQL_URL", "MYSQL_PUBLIC_URL", "DATABASE_URL")
    )

    # Discrete connection parts, used when no usable connection string is set
    db_host: str | None = Field(None, validation_alias=AliasChoices("MYSQL_HOST", "MYSQLHOST"))
    db_user: str | None = Field(None, validation_alias=AliasChoices("MYSQL_USER", "MYSQLUSER"))
    db_password: str | None = Field(None, validation_alias=AliasChoices("MYSQL_PASSWORD", "MYSQLPASSWORD"))
    db_name: str | None = Field(None, validation_alias=AliasChoices("MYSQL_DATABASE", "MYSQLDATABASE"))
    # Kept as text so a bad value surfaces as a configuration error at provisioning
    db_port: str | None = Field(None, validation_alias=AliasChoices("MYSQL_PORT", "MYSQLPORT"))
    db_driver: str = Field("mysql+aiomysql", validation_alias=AliasChoices("DB_DRIVER"))

    # HTTP server
    listen_host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "info"

    @field_validator("database_url", "db_host", "db_user", "db_password", "db_name", "db_port", mode="before")
    @classmethod
    def blank_as_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("db_port", mode="before")
    @classmethod
    def port_as_text(cls, v):
        return str(v) if isinstance(v, int) else v

    class Config:
        env_file = ".env"
        env_ignore_empty = True
        extra = "ignore"
        populate_by_name = True

settings = Settings()
