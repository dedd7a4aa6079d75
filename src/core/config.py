from typing import Any, List, Optional, Union

from pydantic import AnyHttpUrl, Field, PostgresDsn, ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    ENVIRONMENT_NAME: str = "Development"

    @property
    def is_production(self):
        return self.ENVIRONMENT_NAME == "Production"

    PROJECT_NAME: str = "Team Wallets API"
    API_V1_STR: str = "/api/v1"
    # BACKEND_CORS_ORIGINS is a JSON-formatted list of origins
    # e.g: '["http://localhost:3000", "https://app.example.com"]'
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "teams"
    SQLALCHEMY_DATABASE_URI: Optional[str] = Field(default=None, validate_default=True)

    # Wallet generation backend
    WALLET_BACKEND_URL: str = "http://localhost:3001"
    WALLET_BACKEND_TIMEOUT: float = 30.0
    WALLET_CHAIN: str = "solana"

    # Teams
    TEAM_NAME_MAX_LENGTH: int = 50
    SLUG_MAX_ATTEMPTS: int = 1000

    # Seq log
    SEQ_SERVER_URL: Optional[str] = None
    SEQ_SERVER_API_KEY: Optional[str] = None

    @field_validator("SQLALCHEMY_DATABASE_URI", mode="before")
    def assemble_db_connection(cls, v: str | None, info: ValidationInfo) -> Any:
        if isinstance(v, str) and v:
            return v
        return str(
            PostgresDsn.build(
                scheme="postgresql+psycopg",
                username=info.data.get("POSTGRES_USER"),
                password=info.data.get("POSTGRES_PASSWORD") or None,
                host=info.data.get("POSTGRES_SERVER"),
                path=f"{info.data.get('POSTGRES_DB') or ''}",
            )
        )

    @field_validator("WALLET_BACKEND_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    class Config:

        case_sensitive = True
        env_file = "../.env"
        extra = "allow"


settings = Settings()
