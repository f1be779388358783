"""Link compliance engine.

Pure-Python policy evaluation with no Django dependency: the Django app
supplies a rule store and calls into :class:`ComplianceEvaluator`.
"""

from .classify import classify_link
from .config import EngineConfig, load_config
from .evaluate import ComplianceEvaluator, evaluate_content
from .extract import extract_links
from .matching import DomainSuffixSet, normalize_domain, to_ascii_host
from .rules import RuleSetManager, RuleStore, RuleStoreError, build_rule_set
from .types import (
    ComplianceResult,
    DomainRule,
    DomainRuleSet,
    ExtractedLink,
    LinkClassification,
    LinkViolation,
    RuleMutationResult,
)

__all__ = [
    "ComplianceEvaluator",
    "ComplianceResult",
    "DomainRule",
    "DomainRuleSet",
    "DomainSuffixSet",
    "EngineConfig",
    "ExtractedLink",
    "LinkClassification",
    "LinkViolation",
    "RuleMutationResult",
    "RuleSetManager",
    "RuleStore",
    "RuleStoreError",
    "build_rule_set",
    "classify_link",
    "evaluate_content",
    "extract_links",
    "load_config",
    "normalize_domain",
    "to_ascii_host",
]
