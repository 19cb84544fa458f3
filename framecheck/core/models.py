"""Shared data models for the clickjacking tester."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class Rationale(str, Enum):
    """Human-readable justification attached to every verdict."""
    EMBEDDABLE = "Page is embeddable and missing required security headers."
    NOT_INTERACTIVE = "Page rendered but has necessary headers."
    REFUSED = ("Page refused to render in iframe "
               "(likely protected by headers or other mechanisms).")
    FETCH_ERROR = "Error fetching headers."

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class FetchResult:
    """What the header-fetch collaborator hands back for one target."""
    headers: Dict[str, str] = field(default_factory=dict)
    ip: str = "-"


@dataclass(frozen=True)
class ProtectionSignal:
    """Framing protections found (and not found) in a HeaderSet."""
    has_frame_deny: bool
    has_csp_frame_ancestors: bool
    missing: Tuple[str, ...] = ()

    @property
    def protected(self) -> bool:
        return not self.missing


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one live frame probe."""
    rendered: bool
    interactive: bool
    timed_out: bool = False


@dataclass(frozen=True)
class TestVerdict:
    """Final determination for a single tested URL."""
    __test__ = False

    target_url: str
    source_ip: str
    tested_at: datetime
    protection: ProtectionSignal
    probe: Optional[ProbeOutcome]
    is_vulnerable: Optional[bool]    # None = indeterminate
    rationale: Rationale
    raw_headers: str = ""

    def __str__(self):
        status = {True: "VULNERABLE", False: "not vulnerable"}.get(
            self.is_vulnerable, "indeterminate")
        return f"[{status}] {self.target_url} ({self.source_ip}) — {self.rationale}"


@dataclass(frozen=True)
class TestSession:
    """State of the current test, replaced as a whole on every change."""
    __test__ = False

    generation: int = 0
    target_url: str = ""
    loading: bool = False
    verdict: Optional[TestVerdict] = None
    error: Optional[str] = None
