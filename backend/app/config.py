"""
Alerta Application Configuration
Environment-driven settings for the business impact service
"""

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Alerta Business Impact"
    app_version: str = "1.0.0"
    debug: bool = False

    # Impact propagation
    impact_max_depth: int = Field(default=3, ge=0, description="Deepest dependency hop explored")
    executive_attention_threshold: int = Field(
        default=10, ge=0, description="Affected rule count above which executive attention is required"
    )

    # Rule catalog snapshot (JSON) loaded at startup
    rule_catalog_file: Optional[str] = Field(default=None, description="Path to a JSON rule catalog snapshot")

    # Allowed hosts for CORS, comma-separated in ALERTA_ALLOWED_ORIGINS
    allowed_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["http://localhost:5173"])

    # Logging
    log_level: str = "INFO"

    @validator("allowed_origins", pre=True)
    def split_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @validator("allowed_origins")
    def validate_origins(cls, v):
        for origin in v:
            if not origin.startswith(("https://", "http://localhost")):
                raise ValueError("All origins must use HTTPS (except localhost)")
        return v

    @validator("log_level")
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    class Config:
        env_file = ".env"
        env_prefix = "ALERTA_"
        extra = "allow"  # Allow extra fields from environment


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()
