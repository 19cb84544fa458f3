"""Framing-protection checker — decides which anti-framing headers are present.

Matching is a plain case-insensitive substring test, on purpose loose:
``frame-ancestors *`` still counts as a CSP directive even though it allows
every origin.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from framecheck.core.models import ProtectionSignal

XFO = "X-Frame-Options"
CSP_FRAME_ANCESTORS = "CSP frame-ancestors"


@dataclass(frozen=True)
class FramingRule:
    """One protection: the header to inspect and what it must contain."""
    protection: str
    header: str
    pattern: re.Pattern


# ── Rule table (order is the order of ProtectionSignal.missing) ──

RULES: Tuple[FramingRule, ...] = (
    FramingRule(XFO, "x-frame-options", re.compile(r"deny|sameorigin", re.I)),
    FramingRule(CSP_FRAME_ANCESTORS, "content-security-policy",
                re.compile(r"frame-ancestors", re.I)),
)


def _lower_keys(headers: Mapping) -> Dict[str, object]:
    out = {}
    for k, v in (headers or {}).items():
        if isinstance(k, str):
            out[k.lower()] = v
    return out


def rule_matches(rule: FramingRule, headers: Mapping) -> bool:
    """True if *headers* satisfy *rule*; absent or non-string values never do."""
    value = _lower_keys(headers).get(rule.header)
    if not isinstance(value, str):
        return False
    return bool(rule.pattern.search(value))


def analyze(headers: Mapping, rules: Tuple[FramingRule, ...] = RULES) -> ProtectionSignal:
    """Build the ProtectionSignal for a HeaderSet. Never raises."""
    lowered = _lower_keys(headers)
    present: Dict[str, bool] = {}
    missing: List[str] = []
    for rule in rules:
        ok = rule_matches(rule, lowered)
        present[rule.protection] = ok
        if not ok:
            missing.append(rule.protection)

    return ProtectionSignal(
        has_frame_deny=present.get(XFO, False),
        has_csp_frame_ancestors=present.get(CSP_FRAME_ANCESTORS, False),
        missing=tuple(missing),
    )


class FramingHeaders:
    """Checker wrapper so the engine can name and log the header analysis."""

    name = "Clickjacking (framing headers)"

    def __init__(self, rules: Tuple[FramingRule, ...] = RULES):
        self.rules = rules

    def get_rules(self) -> Tuple[FramingRule, ...]:
        return self.rules

    def check(self, headers: Mapping) -> ProtectionSignal:
        return analyze(headers, self.rules)
