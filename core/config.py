from fastapi import Request
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    USE_DATABASE: bool = False
    STORAGE_FALLBACK: bool = False
    DATABASE_URL: str | None = None
    DIRECT_URL: str | None = None

    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    DB_HOST: str | None = None
    DB_PORT: str = "3306"
    DB_NAME: str | None = None

    JWT_SECRET: str = "change-me"
    JWT_EXPIRES_DAYS: int = 7

    AUTH_MODE: str = "dev"
    ALLOW_UNVERIFIED_AUTH: bool = False
    CLERK_SECRET_KEY: str | None = None
    IDENTITY_VERIFY_URL: str = "https://api.clerk.com/v1/tokens/verify"

    DEV_USER_ID: str = "dev-user-123"
    DEV_USER_EMAIL: str = "dev@example.com"
    DEV_USER_NAME: str = "Developer"

    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return "sqlite:///./synergysphere.db"

    @property
    def MIGRATION_DATABASE_URI(self):
        return self.DIRECT_URL or self.SQLALCHEMY_DATABASE_URI

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @model_validator(mode="after")
    def _check_auth_mode(self):
        if self.AUTH_MODE not in ("local", "external", "dev"):
            raise ValueError(f"Unknown AUTH_MODE {self.AUTH_MODE!r}")
        if self.is_production and (self.AUTH_MODE == "dev" or self.ALLOW_UNVERIFIED_AUTH):
            raise ValueError("Unverified authentication cannot be enabled in production")
        return self

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
