"""Root conftest — shared test configuration."""

import os

# Settings are cached on first use: pin safe values before any import of taskboard.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["SMTP_HOST"] = ""
os.environ["SMTP_FROM"] = ""
