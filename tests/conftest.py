"""Test environment: in-memory SQLite, cheap bcrypt, fixed JWT secret. Set before app modules import."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-key-for-the-suite"
os.environ["APP_ENV"] = "dev"
os.environ["LOG_LEVEL"] = "WARNING"
