import os
from dataclasses import dataclass

LIVE_BASE_URL = "https://petstore.swagger.io/v2"
LOCAL_BASE_URL = "http://petstore.local/v2"


@dataclass(frozen=True)
class Settings:
    target: str
    base_url: str
    http_timeout: float
    log_level: str
    propagation_delay: float

    @property
    def is_live(self) -> bool:
        return self.target == "live"


def load_settings() -> Settings:
    """
    Reads the suite configuration from the environment.

    PETSTORE_TARGET=live sends every request to the real service; anything
    else runs against the in-process service double in petstore_app.py.
    """
    target = os.getenv("PETSTORE_TARGET", "local").strip().lower()
    default_url = LIVE_BASE_URL if target == "live" else LOCAL_BASE_URL

    return Settings(
        target=target,
        base_url=os.getenv("PETSTORE_BASE_URL", default_url).rstrip("/"),
        http_timeout=float(os.getenv("PETSTORE_HTTP_TIMEOUT", "10")),
        log_level=os.getenv("PETSTORE_LOG_LEVEL", "INFO").upper(),
        propagation_delay=float(os.getenv("PETSTORE_PROPAGATION_DELAY", "0")),
    )


settings = load_settings()
