"""Runtime settings shared by the CLI, the engine and the fetchers."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT_MS = 3000
DEFAULT_USER_AGENT = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                      "AppleWebKit/537.36 (KHTML, like Gecko) "
                      "Chrome/124.0 Safari/537.36")


@dataclass(frozen=True)
class Config:
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    fetch_timeout: float = 10.0          # seconds, header fetch
    proxy: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    header_service: Optional[str] = None  # remote check-headers endpoint
    headless: bool = True
    watermark: Optional[str] = None       # PNG path for the PDF report
    brand: str = "Quasar CyberTech"
