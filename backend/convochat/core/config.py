"""
Application configuration management using Pydantic Settings.
This file handles all environment variables and app settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic will automatically read from .env file and environment variables.
    Priority: Environment variables > .env file > default values
    """

    # Application
    APP_NAME: str = "ConvoChat"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    APP_URL: str = "http://localhost:3000"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./convochat.db"

    # Security - JWT Configuration
    SECRET_KEY: str = "your-secret-key-change-in-production-use-openssl-rand-hex-32"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # CORS - Allow frontend to connect
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # AI provider (OpenAI-compatible chat completions endpoint)
    AI_API_KEY: str = "your-api-key-here"
    AI_API_BASE_URL: str = "https://openrouter.ai/api/v1"
    AI_MODEL_NAME: str = "openai/gpt-3.5-turbo"
    AI_TEMPERATURE: float = 0.7
    AI_MAX_TOKENS: int = 500
    AI_TIMEOUT_MS: int = 30000
    # Most recent history messages forwarded to the model; 0 forwards everything
    AI_HISTORY_MAX_MESSAGES: int = 20
    AI_SYSTEM_PROMPT: str = (
        "You are a helpful, friendly, and knowledgeable AI assistant. "
        "Answer questions clearly and concisely."
    )

    # Guest account used when no bearer token is supplied
    GUEST_USERNAME: str = "guest"
    GUEST_EMAIL: str = "guest@example.com"
    GUEST_PASSWORD: str = "guest123"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


# Create a global settings instance
settings = Settings()
