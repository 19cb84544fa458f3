"""Merge the header signal and the probe outcome into one TestVerdict."""

import json
from datetime import datetime, timezone
from typing import Mapping, Optional

from framecheck.core.models import (
    ProbeOutcome, ProtectionSignal, Rationale, TestVerdict,
)


def snapshot_headers(headers: Optional[Mapping]) -> str:
    """Serialize a HeaderSet for the report (stable key order)."""
    if headers is None:
        return ""
    return json.dumps({str(k): str(v) for k, v in headers.items()},
                      indent=2, sort_keys=True, ensure_ascii=False)


def choose_rationale(protection: ProtectionSignal,
                     probe: Optional[ProbeOutcome]) -> Rationale:
    if probe is None:
        return Rationale.FETCH_ERROR
    if protection.missing and probe.interactive:
        return Rationale.EMBEDDABLE
    if protection.missing:
        # Headers are actually missing here; the live probe just could not
        # confirm the frame was reachable.
        return Rationale.NOT_INTERACTIVE
    return Rationale.REFUSED


def synthesize(
    protection: ProtectionSignal,
    probe: Optional[ProbeOutcome],
    url: str,
    ip: str = "-",
    tested_at: Optional[datetime] = None,
    raw_headers: str = "",
) -> TestVerdict:
    """
    Turn the two signals into a TestVerdict.

    A missing probe means the header fetch failed before probing, which
    makes the verdict indeterminate (``is_vulnerable is None``).
    """
    if probe is None:
        vulnerable = None
    else:
        vulnerable = bool(protection.missing) and probe.interactive

    return TestVerdict(
        target_url=url,
        source_ip=ip or "-",
        tested_at=tested_at or datetime.now(timezone.utc),
        protection=protection,
        probe=probe,
        is_vulnerable=vulnerable,
        rationale=choose_rationale(protection, probe),
        raw_headers=raw_headers or "",
    )
