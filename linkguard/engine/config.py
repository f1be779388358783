"""Configuration helpers for the link compliance engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .matching import DomainSuffixSet
from .types import DomainRuleSet


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    @property
    def default_blocked_domains(self) -> List[str]:
        return list(self.raw.get("default_blocked_domains", []))

    @property
    def default_allowed_domains(self) -> List[str]:
        return list(self.raw.get("default_allowed_domains", []))

    @property
    def rule_load_timeout(self) -> Optional[float]:
        value = self.raw.get("rule_load_timeout")
        return float(value) if value is not None else None

    @property
    def rule_cache_size(self) -> int:
        return int(self.raw.get("rule_cache_size", DEFAULT_RULE_CACHE_SIZE))

    def default_rule_set(self, tenant_id: str | None = None, source: str = "defaults") -> DomainRuleSet:
        """Compile the system default lists into a rule set snapshot."""

        return DomainRuleSet(
            blocked=DomainSuffixSet(self.default_blocked_domains),
            allowed=DomainSuffixSet(self.default_allowed_domains),
            competitor=DomainSuffixSet(),
            tenant_id=tenant_id,
            source=source,
        )


# Tenants whose snapshots stay cached at once.
DEFAULT_RULE_CACHE_SIZE = 1024

DEFAULTS: Dict[str, Any] = {
    # Competitors and news outlets.
    "default_blocked_domains": [
        "forbes.com",
        "entrepreneur.com",
        "businessinsider.com",
        "inc.com",
        "fastcompany.com",
        "hbr.org",
        "wsj.com",
        "bloomberg.com",
        "cnbc.com",
        "reuters.com",
        "nytimes.com",
        "washingtonpost.com",
        "bbc.com",
        "cnn.com",
        "fortune.com",
        "theatlantic.com",
        "wired.com",
    ],
    # Government, accreditation bodies and professional associations.
    "default_allowed_domains": [
        "bls.gov",
        "stats.bls.gov",
        "ed.gov",
        "nces.ed.gov",
        "studentaid.gov",
        "fafsa.gov",
        "collegescorecard.ed.gov",
        "chea.org",
        "aacsb.edu",
        "abet.org",
        "cacrep.org",
        "ccne-accreditation.org",
        "cswe.org",
        "apa.org",
        "nasw.org",
        "nursingworld.org",
    ],
    "rule_load_timeout": None,
    "rule_cache_size": DEFAULT_RULE_CACHE_SIZE,
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults.

    List values in the YAML file replace the default lists rather than
    extending them, so a deployment can shrink the defaults as well.
    """

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ValueError(f"Engine config at {path} must be a mapping, got {type(user).__name__}")
        merge_into(data, user)

    for key in ("default_blocked_domains", "default_allowed_domains"):
        if not isinstance(data.get(key), list):
            raise ValueError(f"Engine config key {key!r} must be a list of domains")
    cache_size = data.get("rule_cache_size")
    if isinstance(cache_size, bool) or not isinstance(cache_size, int) or cache_size < 1:
        raise ValueError("Engine config key 'rule_cache_size' must be a positive integer")

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
