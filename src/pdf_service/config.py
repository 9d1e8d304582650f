import os
from dataclasses import dataclass

from . import __version__


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup and never mutated."""

    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False
    max_body_mb: int = 50
    request_timeout_sec: float = 60.0
    max_scale: float = 10.0
    log_level: str = "INFO"
    version: str = __version__

    @property
    def max_body_bytes(self) -> int:
        return self.max_body_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            reload=_env_flag("RELOAD", "false"),
            max_body_mb=int(os.getenv("MAX_BODY_MB", "50")),
            request_timeout_sec=float(os.getenv("REQUEST_TIMEOUT_SEC", "60")),
            max_scale=float(os.getenv("MAX_RENDER_SCALE", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            version=os.getenv("PDF_SERVICE_VERSION", __version__),
        )
