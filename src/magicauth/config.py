from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # e.g. mongodb://localhost:27017/magicauth
    magic_link_secret: str  # Secret used to derive the magic link encryption key
    debug: bool = False
    environment: str = "development"  # "production" disables development-only warnings

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MAGICAUTH_",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
