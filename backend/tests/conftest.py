"""Root conftest — shared test configuration."""

import os

# Settings are cached on first import; pin them before any app module loads
os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
