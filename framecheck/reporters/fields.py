"""Display strings derived from a TestVerdict (shared by console and PDF)."""

from datetime import timezone
from email.utils import format_datetime

from framecheck.core.models import TestVerdict

NO_MISSING = "None - Site is protected"
FETCH_FAILED = "Error fetching headers"


def format_tested_at(v: TestVerdict) -> str:
    """RFC 1123 form, e.g. ``Sat, 17 Oct 2026 09:30:00 GMT``."""
    when = v.tested_at
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return format_datetime(when.astimezone(timezone.utc), usegmt=True)


def missing_summary(v: TestVerdict) -> str:
    if v.probe is None:
        return FETCH_FAILED
    if not v.protection.missing:
        return NO_MISSING
    return ", ".join(v.protection.missing)


def status_label(v: TestVerdict) -> str:
    if v.is_vulnerable is None:
        return "Indeterminate"
    return "VULNERABLE" if v.is_vulnerable else "Not Vulnerable"
