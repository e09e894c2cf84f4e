"""
Environment configuration for the team inventory service.
"""
import os

# memory | sql | redis
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./team_inventory.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
STORAGE_KEY_PREFIX = os.getenv("STORAGE_KEY_PREFIX", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
