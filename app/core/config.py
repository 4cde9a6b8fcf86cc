from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./portal.db"
    AUTH_SECRET: str

    # "today" for week statuses is taken in this zone
    TIMEZONE: str = "Europe/Moscow"
    LOG_LEVEL: str = "INFO"

    # admin user created on startup if missing
    LOGIN_USERNAME: str = "admin"
    TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 7

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
