from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    DATABASE_URL: str = "sqlite:///./sportsmeet.db"
    LOG_LEVEL: str = "INFO"

    # Client side
    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT: float = 15.0 # seconds
    TOKEN_FILE: str = ".sportsmeet/credentials.json"
    DEFAULT_JOIN_MESSAGE: str = "I'd like to join this event!"

    class Config:
        env_file = ".env"

settings = Settings()
