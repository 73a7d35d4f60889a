"""
Configuration management for Recipe Hub.

This module centralizes environment variable loading from .env file at project root.
It should be imported early in both backend (api/main.py) and frontend (streamlit_app/app.py)
to ensure .env is loaded before any other code accesses environment variables.

In production, .env will not exist, but load_dotenv() is safe to call and will no-op.
Environment variables from the deployment platform will be used instead.

Environment Variables:
- SPOONACULAR_API_KEY: Required for the Spoonacular connector
- SPOONACULAR_BASE_URL: Optional, defaults to "https://api.spoonacular.com"
- MEALDB_BASE_URL: Optional, defaults to "https://www.themealdb.com/api/json/v1/1"
- HTTP_TIMEOUT_SECONDS: Optional, timeout for upstream recipe APIs (default: 10)
- DATABASE_URL: Optional, SQLAlchemy URL for tracking tables (default: sqlite:///recipehub.db)
- LOCAL_STORAGE_DIR: Optional, directory for client-side stores (default: .recipehub_storage)
- LOG_LEVEL: Optional, root log level (default: INFO)
- BACKEND_URL: Optional, backend URL used by the frontend (defaults to http://localhost:8000)
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    This function locates the project root by going up from this file's location
    (api/config.py -> project root) and loads .env if it exists.

    Safe to call multiple times. Existing environment variables take precedence.
    """
    this_file = Path(__file__).resolve()
    project_root = this_file.parent.parent
    env_path = project_root / ".env"

    load_dotenv(env_path, override=False)


# Load .env file on module import
load_env_file()


class SpoonacularConfig:
    """Configuration for the Spoonacular connector."""

    @staticmethod
    def get_api_key() -> Optional[str]:
        """
        Get Spoonacular API key from environment.

        Returns:
            API key string or None if not set

        Note:
            This does not raise an error - let the connector handle validation.
        """
        return os.getenv("SPOONACULAR_API_KEY")


class StorageConfig:
    """Configuration for client-side persisted stores."""

    @staticmethod
    def get_storage_dir() -> Path:
        """Get the directory where per-session local storage files live."""
        return Path(os.getenv("LOCAL_STORAGE_DIR", ".recipehub_storage"))


def get_log_level() -> str:
    """Get the configured log level name (default: "INFO")."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_required_env_vars() -> dict:
    """
    Get a dictionary of all required environment variables and their status.

    Returns:
        Dictionary with keys:
        - spoonacular_api_key: bool (True if set)
    """
    return {
        "spoonacular_api_key": SpoonacularConfig.get_api_key() is not None,
    }


def validate_required_config() -> None:
    """
    Validate that all required environment variables are set.

    Raises:
        RuntimeError: If any required configuration is missing

    Note:
        TheMealDB needs no credentials, so the app still works (with half the
        recipe sources) when this raises.
    """
    missing = []

    if not SpoonacularConfig.get_api_key():
        missing.append("SPOONACULAR_API_KEY (required for Spoonacular recipes and nutrition)")

    if missing:
        raise RuntimeError(
            f"Missing required environment variables:\n" +
            "\n".join(f"  - {var}" for var in missing) +
            "\n\nPlease create a .env file at the project root with these variables."
        )
