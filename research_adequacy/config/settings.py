"""Application settings and environment configuration."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Merger defaults
    max_sources: int = int(os.getenv("RESEARCH_MAX_SOURCES", "50"))
    remove_duplicates: bool = _env_bool("RESEARCH_REMOVE_DUPLICATES", "true")
    prioritize_documents: bool = _env_bool("RESEARCH_PRIORITIZE_DOCUMENTS", "true")

    # Document ingestion
    max_document_mb: int = int(os.getenv("RESEARCH_MAX_DOCUMENT_MB", "50"))

    # Validation default when the caller does not pass a duration
    default_duration_minutes: int = int(os.getenv("RESEARCH_DEFAULT_DURATION_MINUTES", "45"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def validate(self) -> list[str]:
        """Validate settings values."""
        errors = []
        if self.max_sources < 0:
            errors.append("RESEARCH_MAX_SOURCES must be zero (no limit) or positive")
        if self.max_document_mb <= 0:
            errors.append("RESEARCH_MAX_DOCUMENT_MB must be positive")
        if self.default_duration_minutes <= 0:
            errors.append("RESEARCH_DEFAULT_DURATION_MINUTES must be positive")
        if self.log_level not in logging.getLevelNamesMapping():
            errors.append(f"LOG_LEVEL {self.log_level!r} is not a logging level")
        return errors


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for applications embedding the pipeline."""
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global settings instance
settings = Settings()
