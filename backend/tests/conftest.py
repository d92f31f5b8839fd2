"""Root conftest — shared test configuration."""

import os

# Settings are cached on first use; pin test values before any app import
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENABLE_TESTING_ROUTES", "true")
