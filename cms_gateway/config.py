"""
Configuration module for the CMS gateway
"""

import os
from pathlib import Path


def env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable"""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def _read_version_from_repo(default: str = "dev") -> str:
    try:
        # repo root: cms_gateway/.. (two parents up)
        version_file = Path(__file__).resolve().parents[1] / "VERSION"
        v = version_file.read_text(encoding="utf-8").strip()
        if v:
            return v
    except OSError:
        pass
    return os.getenv("APP_VERSION", default)


API_VERSION = _read_version_from_repo()
SERVICE_NAME = "cms-gateway"

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cms_gateway.db")

# API configuration
API_PREFIX = os.getenv("API_PREFIX", "/v1")
APP_PORT = int(os.getenv("APP_PORT", "8000"))

# CORS configuration
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, X-API-Key, X-Tenant-ID"

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
LOG_SAMPLE_RATE = float(os.getenv("LOG_SAMPLE_RATE", "1.0"))
LOG_EXCLUDE_PATHS = set(
    os.getenv("LOG_EXCLUDE_PATHS", f"{API_PREFIX}/health,{API_PREFIX}/metrics/prometheus").split(",")
)

# Form submissions
DEFAULT_SUBMIT_MESSAGE = os.getenv("DEFAULT_SUBMIT_MESSAGE", "Thank you!")


class RuntimeConfig:
    """Runtime configuration manager for behaviour flags"""

    def __init__(self):
        self._flags = {}
        self._load_from_env()

    def _load_from_env(self):
        """Load flags from environment variables"""
        self._flags = {
            # forms:submit accepted with only X-Tenant-ID
            "PUBLIC_FORM_SUBMIT": env_bool("PUBLIC_FORM_SUBMIT", False),
            # 404/403 instead of a single 400 for routing and permission misses
            "DISTINCT_ROUTE_ERRORS": env_bool("DISTINCT_ROUTE_ERRORS", False),
            # pass store exception messages through on 500
            "EXPOSE_INTERNAL_ERRORS": env_bool("EXPOSE_INTERNAL_ERRORS", True),
        }

    def get(self, key: str, default=None):
        """Get a flag value"""
        return self._flags.get(key, default)

    def set(self, key: str, value: bool):
        """Set a flag value"""
        if key in self._flags:
            self._flags[key] = bool(value)

    def reset(self):
        """Reload flags from the environment"""
        self._load_from_env()

    def get_all(self) -> dict:
        """Get all flags"""
        return self._flags.copy()


# Global runtime config instance
runtime_config = RuntimeConfig()


def get_public_form_submit() -> bool:
    return runtime_config.get("PUBLIC_FORM_SUBMIT", False)


def get_distinct_route_errors() -> bool:
    return runtime_config.get("DISTINCT_ROUTE_ERRORS", False)


def get_expose_internal_errors() -> bool:
    return runtime_config.get("EXPOSE_INTERNAL_ERRORS", True)
