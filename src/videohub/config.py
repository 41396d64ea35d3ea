import os
from typing import List


def _split_env_list(value: str) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item and item.strip()]


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default) in {"1", "true", "True", "yes"}


class Settings:
    """Centralized application settings loaded from environment variables.

    Keeps id/token shape, notification delivery mode and the HTTP surface
    knobs (CORS, rate limit, replicas) in one place.
    """

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Ids / tokens
    VIDEO_ID_LENGTH: int = int(os.getenv("VIDEO_ID_LENGTH", "5"))
    TOKEN_LENGTH: int = int(os.getenv("TOKEN_LENGTH", "7"))
    ID_MAX_ATTEMPTS: int = int(os.getenv("ID_MAX_ATTEMPTS", "32"))

    # Notifications
    # When set, a follower whose live callback received an upload does not
    # also get it appended to the pending queue.
    SKIP_PENDING_WHEN_DELIVERED: bool = _env_flag("SKIP_PENDING_WHEN_DELIVERED")

    # Number of BackendService replicas behind the round-robin proxy.
    # All replicas share one ServiceContext.
    BACKEND_REPLICAS: int = int(os.getenv("BACKEND_REPLICAS", "1"))

    # HTTP surface
    RATE_LIMIT: str = os.getenv("RATE_LIMIT", "100/minute")
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))

    # CORS
    # Comma-separated list, e.g. "http://localhost:3000,http://localhost:5173"
    _cors_origins_env: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://localhost:8000",
    )
    CORS_ORIGINS: List[str] = _split_env_list(_cors_origins_env)


settings = Settings()
