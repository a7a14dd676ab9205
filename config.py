import os
import logging
import sys
from typing import Optional

import structlog

from exceptions import ConfigurationError

logger = logging.getLogger("ballotbox")


def get_logger(name: str = "ballotbox"):
    """Get a structured logger instance

    Usage:
        logger = get_logger(__name__)
        logger = logger.bind(component="session", session_id="abc")
        logger.info("ballot confirmed", offices=5)

    Args:
        name: Logger name (typically __name__ or module path)

    Returns:
        Structured logger instance with context binding support
    """
    return structlog.get_logger(name)


class Config:
    """Configuration management for ballotbox"""

    def __init__(self):
        # Local state file (stands in for browser local storage)
        default_data_dir = os.path.join(os.getcwd(), "data")
        self.DB_DIR = os.getenv("BALLOT_DB_DIR", default_data_dir)
        self.STATE_DB_PATH = os.getenv("BALLOT_STATE_DB", f"{self.DB_DIR}/ballot.db")

        # API configuration
        self.API_HOST = os.getenv("BALLOT_HOST", "0.0.0.0")
        self.API_PORT = int(os.getenv("BALLOT_PORT", "8000"))
        self.DEBUG = os.getenv("BALLOT_DEBUG", "false").lower() == "true"

        # External APIs
        self.GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
        self.LLM_API_KEY = os.getenv("LLM_API_KEY")  # Fallback

        # Insight generation
        self.INSIGHT_MODEL = os.getenv("BALLOT_INSIGHT_MODEL", "gemini-3-flash-preview")
        self.INSIGHT_TEMPERATURE = float(os.getenv("BALLOT_INSIGHT_TEMPERATURE", "0.7"))
        self.INSIGHT_TOP_P = float(os.getenv("BALLOT_INSIGHT_TOP_P", "0.8"))
        self.INSIGHT_TIMEOUT_SECONDS = float(
            os.getenv("BALLOT_INSIGHT_TIMEOUT_SECONDS", "30")
        )

        # Traffic simulation (demo only)
        self.SIMULATION_INTERVAL_SECONDS = float(
            os.getenv("BALLOT_SIMULATION_INTERVAL_SECONDS", "1.5")
        )
        self.SIMULATION_SKIP_PROBABILITY = float(
            os.getenv("BALLOT_SIMULATION_SKIP_PROBABILITY", "0.1")
        )

        # CORS settings
        self.ALLOWED_ORIGINS = self._parse_origins(
            os.getenv(
                "BALLOT_ALLOWED_ORIGINS",
                "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
            )
        )

        # Logging
        self.LOG_LEVEL = os.getenv("BALLOT_LOG_LEVEL", "INFO").upper()

        # Validate configuration
        self._validate()

    def _parse_origins(self, origins_str: str) -> list:
        """Parse comma-separated origins string"""
        if not origins_str:
            return []
        return [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    def _validate(self):
        """Validate configuration values"""
        if self.API_PORT <= 0 or self.API_PORT > 65535:
            raise ConfigurationError(
                "BALLOT_PORT must be between 1 and 65535",
                config_key="BALLOT_PORT",
            )

        if not 0.0 <= self.INSIGHT_TEMPERATURE <= 2.0:
            raise ConfigurationError(
                "BALLOT_INSIGHT_TEMPERATURE must be between 0 and 2",
                config_key="BALLOT_INSIGHT_TEMPERATURE",
            )

        if not 0.0 < self.INSIGHT_TOP_P <= 1.0:
            raise ConfigurationError(
                "BALLOT_INSIGHT_TOP_P must be in (0, 1]",
                config_key="BALLOT_INSIGHT_TOP_P",
            )

        if self.INSIGHT_TIMEOUT_SECONDS <= 0:
            raise ConfigurationError(
                "BALLOT_INSIGHT_TIMEOUT_SECONDS must be positive",
                config_key="BALLOT_INSIGHT_TIMEOUT_SECONDS",
            )

        if self.SIMULATION_INTERVAL_SECONDS <= 0:
            raise ConfigurationError(
                "BALLOT_SIMULATION_INTERVAL_SECONDS must be positive",
                config_key="BALLOT_SIMULATION_INTERVAL_SECONDS",
            )

        if not 0.0 <= self.SIMULATION_SKIP_PROBABILITY < 1.0:
            raise ConfigurationError(
                "BALLOT_SIMULATION_SKIP_PROBABILITY must be in [0, 1)",
                config_key="BALLOT_SIMULATION_SKIP_PROBABILITY",
            )

        if not self.get_api_key():
            logger.warning("No Gemini API key configured - insights will return fallback text")

    def get_api_key(self) -> Optional[str]:
        """Get the API key for the insight service"""
        return self.GEMINI_API_KEY or self.LLM_API_KEY

    def ensure_data_dir(self) -> str:
        """Lazily create data directory if it doesn't exist

        Returns:
            Path to the data directory
        """
        if not os.path.exists(self.DB_DIR):
            logger.info("creating data directory %s", self.DB_DIR)
            os.makedirs(self.DB_DIR, exist_ok=True)
        return self.DB_DIR

    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.DEBUG or "localhost" in str(self.ALLOWED_ORIGINS)

    def summary(self) -> dict:
        """Get a summary of current configuration (excluding secrets)"""
        return {
            "db_dir": self.DB_DIR,
            "state_db": os.path.basename(self.STATE_DB_PATH),
            "api_host": self.API_HOST,
            "api_port": self.API_PORT,
            "debug": self.DEBUG,
            "insight_model": self.INSIGHT_MODEL,
            "insight_temperature": self.INSIGHT_TEMPERATURE,
            "insight_top_p": self.INSIGHT_TOP_P,
            "insight_timeout_seconds": self.INSIGHT_TIMEOUT_SECONDS,
            "simulation_interval_seconds": self.SIMULATION_INTERVAL_SECONDS,
            "allowed_origins_count": len(self.ALLOWED_ORIGINS),
            "log_level": self.LOG_LEVEL,
            "has_api_key": bool(self.get_api_key()),
            "is_development": self.is_development(),
        }


def configure_structlog(is_development: bool = False, log_level: str = "INFO"):
    """Configure structlog for structured logging

    Args:
        is_development: If True, use human-readable key/value output. If False, use JSON.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if is_development:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ]
    else:
        # JSON for log aggregation
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )


# Global configuration instance
config = Config()

configure_structlog(
    is_development=config.is_development(),
    log_level=config.LOG_LEVEL
)
