"""Centralized configuration via pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Service
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # D-ID vendor API
    did_api_key: str = ""
    did_api_url: str = "https://api.d-id.com"
    did_request_timeout: float = 30.0
    presenter_list_limit: int = 4

    # Public URL resolution for uploaded images
    public_base_url: str | None = None
    vercel_url: str | None = None
    environment: str = "development"
    production_base_url: str = "https://your-domain.com"
    dev_base_url: str = "http://localhost:3000"

    # Uploads
    public_dir: str = "public"
    avatars_url_prefix: str = "/avatars/"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Client polling
    poll_interval: float = 2.0
    poll_max_attempts: int | None = None

    # Featured auctioneer
    featured_avatar_id: str = "custom-avatar"
    featured_avatar_name: str = "John Wick"
    featured_avatar_image: str = "https://i.ibb.co/m5rrScPL/john-wick-2.png"
    featured_avatar_voice: str = "Matthew (Amazon)"
    featured_avatar_specialty: str = "Professional Auctioneer"
    featured_avatar_voice_id: str = "en-US-DavisNeural"
    featured_avatar_gender: str = "male"
    featured_avatar_is_custom: bool = True
    featured_avatar_has_custom_voice: bool = False

    @property
    def did_configured(self) -> bool:
        return bool(self.did_api_key.strip())

    def resolve_public_base_url(self) -> str:
        """Origin the vendor should use to fetch files served from public_dir."""
        if self.public_base_url:
            return self.public_base_url.rstrip("/")
        if self.vercel_url:
            return f"https://{self.vercel_url}"
        if self.environment == "production":
            return self.production_base_url.rstrip("/")
        return self.dev_base_url.rstrip("/")
