import os


def env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.environ.get("CATALOG_SECRET") or "dev-secret-change-me"
    # None means a SQLite file in the instance folder, see create_app
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Security headers; HTTPS redirects only when asked for
    FORCE_HTTPS = env_flag("FORCE_HTTPS")
    WTF_CSRF_ENABLED = True

    # Fan out independent reads of a request to worker threads
    PARALLEL_READS = env_flag("PARALLEL_READS", True)
    # 404 instead of redirecting to the list when an update or delete page
    # is opened for a missing record
    STRICT_NOT_FOUND = env_flag("STRICT_NOT_FOUND")
