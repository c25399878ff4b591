"""Root conftest — shared test configuration."""

import os

# Keep tests off real infrastructure and keep batch latency short
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("PROCESSING_DELAY_MS", "5")
os.environ.setdefault("PROCESSING_POOL_SIZE", "10")
