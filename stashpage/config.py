import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "default-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", f"sqlite:///{BASE_DIR / 'stashpage.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_IMPORT_BYTES", str(5 * 1024 * 1024)))
    REGISTRATION_ENABLED = os.environ.get("REGISTRATION_ENABLED", "1") == "1"

    STASH_DEFAULT_POSITION_X = int(os.environ.get("STASH_DEFAULT_POSITION_X", "50"))
    STASH_DEFAULT_POSITION_Y = int(os.environ.get("STASH_DEFAULT_POSITION_Y", "50"))
    STASH_MAX_CATEGORIES_PER_PAGE = int(
        os.environ.get("STASH_MAX_CATEGORIES_PER_PAGE", "50")
    )
    STASH_ENABLE_POSITION_VALIDATION = (
        os.environ.get("STASH_ENABLE_POSITION_VALIDATION", "1") == "1"
    )
    SEARCH_MIN_QUERY_LENGTH = int(os.environ.get("SEARCH_MIN_QUERY_LENGTH", "2"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REGISTRATION_ENABLED = True
    STASH_MAX_CATEGORIES_PER_PAGE = 5
