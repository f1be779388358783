"""Coordinator for a compliance pass over one content body."""

from __future__ import annotations

from typing import Dict, List, Optional

from .classify import classify_link
from .extract import extract_links
from .rules import RuleSetManager
from .types import ComplianceResult, DomainRuleSet, LinkViolation


def evaluate_content(content: Optional[str], rule_set: DomainRuleSet) -> ComplianceResult:
    """Classify every link in ``content`` and fold the outcomes into a result.

    Pure function of its inputs: the same content and snapshot always give
    an equal result, with violations and allowed links in document order.
    """

    if content is not None and not isinstance(content, str):
        raise TypeError(f"content must be a string, got {type(content).__name__}")

    links = extract_links(content)
    counts: Dict[str, int] = {"internal": 0, "anchor": 0, "external": 0, "invalid": 0}
    violations: List[LinkViolation] = []
    # dict keeps insertion order, giving an ordered set of URLs
    allowed: Dict[str, None] = {}
    blocked_count = 0
    warning_count = 0

    for link in links:
        outcome = classify_link(link.url, link.anchor_text, rule_set)
        counts[outcome.category] += 1

        # Unapproved links carry only a warning and stay valid, so they are
        # listed as allowed alongside the approved ones.
        if outcome.category in ("internal", "external") and outcome.is_valid:
            allowed.setdefault(link.url, None)

        violation = outcome.violation
        if violation is None:
            continue
        violations.append(violation)
        if violation.severity == "error":
            blocked_count += 1
        else:
            warning_count += 1

    return ComplianceResult(
        is_compliant=blocked_count == 0,
        violations=tuple(violations),
        allowed_links=tuple(allowed),
        blocked_count=blocked_count,
        warning_count=warning_count,
        total_links=len(links),
        internal_links=counts["internal"],
        external_links=counts["external"],
        anchor_links=counts["anchor"],
        invalid_links=counts["invalid"],
    )


class ComplianceEvaluator:
    """Evaluates tenant content against that tenant's current rule snapshot."""

    def __init__(self, manager: RuleSetManager) -> None:
        self._manager = manager

    def evaluate(self, tenant_id: str, content: Optional[str]) -> ComplianceResult:
        rule_set = self._manager.load(tenant_id)
        return evaluate_content(content, rule_set)
