"""
Environment configuration for the persistence layer.

The scheduler and aggregation engine never read the environment; only the
repositories and scripts use these values.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from flashcore.errors import ConfigurationError

# Load environment
load_dotenv()


# ---- Collection names ----

FLASHCARDS_COLLECTION = "flashcards"
REVIEW_LOGS_COLLECTION = "reviewLogs"
USER_SETTINGS_COLLECTION = "userSettings"
SNAPSHOTS_COLLECTION = "stableSnapshots"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("FLASHCORE_TEST_MODE", "false").lower() == "true"


def get_mongo_uri() -> str:
    """
    Get the MongoDB connection string.

    Raises:
        ConfigurationError: if MONGO_URI is not set
    """
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ConfigurationError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_db_name() -> str:
    """
    Database name, suffixed with ``_test`` in test mode.
    """
    name = os.getenv("FLASHCORE_DB_NAME", "flashcards_app")
    if is_test_mode():
        return f"{name}_test"
    return name


def get_default_user_id() -> str:
    """Get default user id for scoping card data."""
    return os.getenv("DEFAULT_USER_ID", "local")
