"""
Shared test configuration.

Environment must be set before any app import: settings are read once at
import time. Tests use an in-memory SQLite database and the cheapest bcrypt cost.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-32b")
os.environ.setdefault("REGISTER_GRANTS_ADMIN", "true")
