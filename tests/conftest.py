"""Test environment: in-memory SQLite, a fixed signing secret and cheap bcrypt.

Set before any userhub module is imported, since settings and the engine are
built at import time.
"""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-userhub-tests"
os.environ["BCRYPT_ROUNDS"] = "4"
