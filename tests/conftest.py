"""
Shared test setup.

Environment must be seeded before any warden import: settings, the engine and
the timing-equalisation digest are all built at module import time.
"""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789-abcdefghijklmnop")
os.environ.setdefault("JWT_EXPIRES", "2h")
os.environ.pop("COOKIE_DOMAIN", None)
