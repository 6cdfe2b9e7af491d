from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # mongodb://host:port/dbname, or memory:// for in-process backends
    host: str = "127.0.0.1"
    port: int = 3100
    debug: bool = False
    cors_origins: list[str] = []
    audio_path: str  # Directory path for storing uploaded audio clips
    cookie_secure: bool = True  # Disable only for plain-HTTP local development
    session_ttl_seconds: int = 7 * 24 * 60 * 60
    upload_max_requests: int = 10  # Uploads allowed per user within one window
    upload_window_seconds: int = 60 * 60
    max_upload_bytes: int = 50 * 1024 * 1024
    feed_limit: int = 50

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SOUNDMAP_",
        "extra": "ignore",
    }

    @property
    def uses_memory_backends(self) -> bool:
        return self.database_url.startswith("memory://")
