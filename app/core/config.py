"""
ZAP Confeitaria - Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
import secrets
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env com override para sobrescrever variáveis do sistema
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)


class Settings(BaseSettings):
    # App
    APP_NAME: str = "ZAP Confeitaria"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database (SQLite local, PostgreSQL em produção via postgresql+asyncpg://)
    DATABASE_URL: str = "sqlite+aiosqlite:///./zap_confeitaria.db"

    @property
    def db_url(self) -> str:
        """DATABASE_URL com driver async (postgres:// vira postgresql+asyncpg://)"""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        return url

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Rate limits (formato slowapi)
    LOGIN_RATE_LIMIT: str = "10/minute"

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Email Settings (SMTP)
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@zapconfeitaria.com.br"
    SMTP_FROM_NAME: str = "ZAP Confeitaria"
    SMTP_TLS: bool = True
    SMTP_SSL: bool = False

    # Notificação de erros críticos por email
    ERROR_NOTIFICATION_ENABLED: bool = False
    ERROR_NOTIFICATION_EMAIL: str = "suporte@zapconfeitaria.com.br"

    # App URLs
    APP_URL: str = "https://www.zapconfeitaria.com.br"
    PASSWORD_RESET_URL: str = "https://www.zapconfeitaria.com.br/auth"
    PRICING_URL: str = "/pricing"

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    SUBSCRIPTION_REQUIRED: bool = False

    # Arquivos (logos e PDFs salvos)
    UPLOADS_DIR: Optional[str] = None

    # Documentos
    DEFAULT_COMPANY_NAME: str = "Confeitaria Pro"

    class Config:
        extra = "ignore"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
