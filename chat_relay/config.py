from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHAT_RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Optional rotating log file")

    # Storage
    data_dir: Path = Field(default=Path("."), description="Directory holding the JSON records")
    messages_file: str = Field(default="messages.json")
    chat_users_file: str = Field(default="chatUsers.json")
    history_limit: int = Field(default=3, ge=1, le=3, description="Messages kept per conversation")

    # Tournament backend
    roster_base_url: str = Field(default="https://msi-tournament-backend.onrender.com")
    roster_timeout_seconds: float = Field(default=10.0, gt=0)

    # CORS
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:8080",
            "http://127.0.0.1:5500",
            "http://127.0.0.1:5501",
            "https://merry-klepon-890f17.netlify.app",
            "https://msigaminguniverse.com",
            "https://www.msigaminguniverse.com",
            "https://chat-71oo.onrender.com",
        ]
    )
    cors_allow_credentials: bool = True

    @property
    def messages_path(self) -> Path:
        return self.data_dir / self.messages_file

    @property
    def chat_users_path(self) -> Path:
        return self.data_dir / self.chat_users_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
