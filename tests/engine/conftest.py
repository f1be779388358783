"""Shared fixtures for engine tests."""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional

import pytest

from linkguard.engine.config import load_config
from linkguard.engine.matching import DomainSuffixSet
from linkguard.engine.rules import RuleStoreError
from linkguard.engine.types import DomainRule, DomainRuleSet


@pytest.fixture()
def engine_config():
    """Provide the default engine configuration."""

    return load_config(None)


@pytest.fixture()
def default_rules(engine_config):
    return engine_config.default_rule_set()


def make_rule_set(
    *,
    blocked: Iterable[str] = (),
    allowed: Iterable[str] = (),
    competitor: Iterable[str] = (),
) -> DomainRuleSet:
    competitor = list(competitor)
    return DomainRuleSet(
        blocked=DomainSuffixSet([*blocked, *competitor]),
        allowed=DomainSuffixSet(allowed),
        competitor=DomainSuffixSet(competitor),
        source="tenant",
    )


def make_rule(domain: str, rule_type: str, *, active: bool = True, id: Optional[str] = None) -> DomainRule:
    return DomainRule(domain=domain, rule_type=rule_type, active=active, id=id)


class FakeStore:
    """In-memory rule store with switchable failures and an optional gate."""

    def __init__(self, rules: Iterable[DomainRule] = ()) -> None:
        self.rules: List[DomainRule] = list(rules)
        self.list_calls = 0
        self.fail_reads = False
        self.fail_writes = False
        self.fail_increments = False
        self.increments: List[tuple[str, str]] = []
        self.gate: Optional[threading.Event] = None
        self.entered = threading.Event()
        self._next_id = 1

    def list_active_rules(self, tenant_id: str) -> List[DomainRule]:
        self.list_calls += 1
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.fail_reads:
            raise RuleStoreError("store unavailable")
        return [rule for rule in self.rules if rule.active]

    def list_rules(self, tenant_id: str) -> List[DomainRule]:
        if self.fail_reads:
            raise RuleStoreError("store unavailable")
        return list(reversed(self.rules))

    def insert_rule(self, tenant_id: str, domain: str, rule_type: str, reason: Optional[str] = None) -> DomainRule:
        if self.fail_writes:
            raise RuleStoreError("insert rejected")
        rule = DomainRule(domain=domain, rule_type=rule_type, id=str(self._next_id), tenant_id=tenant_id, reason=reason)
        self._next_id += 1
        self.rules.append(rule)
        return rule

    def delete_rule(self, tenant_id: str, rule_id: str) -> None:
        if self.fail_writes:
            raise RuleStoreError("delete rejected")
        self.rules = [rule for rule in self.rules if rule.id != rule_id]

    def increment_blocked_count(self, tenant_id: str, domain: str) -> None:
        if self.fail_increments:
            raise RuntimeError("analytics down")
        self.increments.append((tenant_id, domain))


@pytest.fixture()
def store():
    return FakeStore()
