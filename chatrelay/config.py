"""
Configuration Management

All settings load from environment variables (and an optional .env file)
through pydantic-settings. Variable names match field names, case-insensitive,
so CLIENT_ID populates ``client_id``.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application Settings

    CLIENT_ID is shared by the Helix API client and the Client-ID header
    sent to the TMI chatter listing.
    """

    log_level: str = "INFO"
    log_categories: Optional[str] = None  # Comma-separated categories (system,chatters,rate_limit). If None, show all logs.
    port: int = 3000
    host: str = "0.0.0.0"

    # Twitch Configuration
    client_id: Optional[str] = None
    twitch_bot_token: Optional[str] = None  # Helix user/app token; "oauth:" prefix accepted

    # TMI chatter listing (undocumented endpoint)
    tmi_base_url: str = "http://tmi.twitch.tv/group/user/"
    chatters_timeout_seconds: float = 1.0

    # Helix API client
    helix_base_url: str = "https://api.twitch.tv/helix"
    helix_timeout_seconds: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Allow extra env vars without validation errors


# Loaded once when the module is imported
settings = Settings()
