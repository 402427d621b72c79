from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List
from dotenv import load_dotenv
from functools import lru_cache

# Load environment variables
load_dotenv()

DEFAULT_INSTAGRAM_SCOPES = ["user_profile", "user_media"]

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    ALLOWED_ORIGINS: str = "*"
    WORKERS: int = 4

    # Instagram login
    INSTAGRAM_CLIENT_ID: str
    INSTAGRAM_CLIENT_SECRET: str
    INSTAGRAM_CALLBACK_URL: str
    INSTAGRAM_SCOPES: str = ",".join(DEFAULT_INSTAGRAM_SCOPES)

    # Threads account posts are published to when the caller sends no x-user-id
    THREADS_USER_ID: str = "me"

    # Upstream endpoints
    INSTAGRAM_AUTH_URL: str = "https://api.instagram.com/oauth/authorize"
    INSTAGRAM_API_URL: str = "https://api.instagram.com"
    INSTAGRAM_GRAPH_URL: str = "https://graph.instagram.com"
    THREADS_GRAPH_URL: str = "https://graph.threads.net/v1.0"

    # Seconds before an upstream call is abandoned
    HTTP_TIMEOUT: float = 30.0

    # Upload staging
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = "threads_service.log"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, value: str) -> str:
        if value not in ["development", "production", "testing"]:
            raise ValueError("Invalid environment")
        return value

    @property
    def oauth_credentials(self) -> Dict:
        """Get Instagram OAuth credentials."""
        return {
            "client_id": self.INSTAGRAM_CLIENT_ID,
            "client_secret": self.INSTAGRAM_CLIENT_SECRET,
            "callback_url": self.INSTAGRAM_CALLBACK_URL
        }

    @property
    def cors_origins(self) -> List[str]:
        """Get CORS origins as list."""
        if self.ENVIRONMENT == "development":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def scopes(self) -> List[str]:
        return [scope.strip() for scope in self.INSTAGRAM_SCOPES.split(",") if scope.strip()]

# Create cached settings instance
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
