"""Typed data structures shared by the link compliance engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .matching import DomainSuffixSet

RULE_TYPES: Tuple[str, ...] = ("blocked", "allowed", "competitor", "trusted")
VIOLATION_TYPES: Tuple[str, ...] = ("blocked", "competitor", "edu_restricted", "unapproved")
SEVERITIES: Tuple[str, ...] = ("error", "warning")
CATEGORIES: Tuple[str, ...] = ("internal", "anchor", "external", "invalid")


@dataclass(frozen=True)
class DomainRule:
    """A single tenant policy entry as read from the rule store."""

    domain: str
    rule_type: str
    match_subdomains: bool = True
    active: bool = True
    id: Optional[str] = None
    tenant_id: Optional[str] = None
    reason: Optional[str] = None
    times_blocked: int = 0
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "domain": self.domain,
            "rule_type": self.rule_type,
            "reason": self.reason,
            "match_subdomains": self.match_subdomains,
            "is_active": self.active,
            "times_blocked": self.times_blocked,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class DomainRuleSet:
    """Immutable snapshot of the domain policy applied to one evaluation.

    ``blocked`` already contains every competitor domain; ``competitor`` is
    kept separately so blocked links can be labelled. ``source`` records
    where the snapshot came from: ``tenant`` rules, the system ``defaults``
    (tenant has no active rules) or a ``fallback`` after a failed load.
    """

    blocked: DomainSuffixSet
    allowed: DomainSuffixSet
    competitor: DomainSuffixSet
    tenant_id: Optional[str] = None
    source: str = "defaults"


@dataclass(frozen=True)
class ExtractedLink:
    """Raw hyperlink occurrence pulled out of a content body."""

    url: str
    anchor_text: str


@dataclass(frozen=True)
class LinkViolation:
    """Policy finding attached to one link."""

    domain: str
    url: str
    anchor_text: str
    rule_type: str
    severity: str
    suggestion: Optional[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "url": self.url,
            "anchor_text": self.anchor_text,
            "rule_type": self.rule_type,
            "severity": self.severity,
            "suggestion": self.suggestion,
            "message": self.message,
        }


@dataclass(frozen=True)
class LinkClassification:
    """Outcome of classifying one link against a rule set."""

    category: str
    is_valid: bool
    violation: Optional[LinkViolation] = None


@dataclass(frozen=True)
class ComplianceResult:
    """Aggregate verdict for every outbound link in one content body."""

    is_compliant: bool
    violations: Tuple[LinkViolation, ...] = ()
    allowed_links: Tuple[str, ...] = ()
    blocked_count: int = 0
    warning_count: int = 0
    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    anchor_links: int = 0
    invalid_links: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_compliant": self.is_compliant,
            "violations": [violation.to_dict() for violation in self.violations],
            "allowed_links": list(self.allowed_links),
            "blocked_count": self.blocked_count,
            "warning_count": self.warning_count,
            "total_links": self.total_links,
            "internal_links": self.internal_links,
            "external_links": self.external_links,
            "anchor_links": self.anchor_links,
            "invalid_links": self.invalid_links,
        }


@dataclass(frozen=True)
class RuleMutationResult:
    """Outcome of adding or removing a tenant rule."""

    success: bool
    error: Optional[str] = None
    rule: Optional[DomainRule] = field(default=None, compare=False)
