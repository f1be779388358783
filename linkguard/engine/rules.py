"""Tenant rule set loading, caching and mutation.

The manager owns the only shared mutable state in the engine: one cached
:class:`DomainRuleSet` per tenant. Snapshots are built completely before
they are published to the cache and are never modified afterwards, so an
evaluation holding a snapshot never sees a half-applied rule change.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from .config import EngineConfig, load_config
from .matching import DomainSuffixSet, normalize_domain
from .types import RULE_TYPES, ComplianceResult, DomainRule, DomainRuleSet, RuleMutationResult

LOGGER = logging.getLogger(__name__)

# Violation labels that correspond to a tenant or default block entry.
BLOCK_RULE_TYPES = ("blocked", "competitor")


class RuleStoreError(Exception):
    """Raised by rule stores when the backing service cannot serve a call."""


class RuleStore(Protocol):
    """Persistence operations the manager needs from a rule backend."""

    def list_active_rules(self, tenant_id: str) -> List[DomainRule]:
        ...

    def list_rules(self, tenant_id: str) -> List[DomainRule]:
        ...

    def insert_rule(self, tenant_id: str, domain: str, rule_type: str, reason: Optional[str] = None) -> DomainRule:
        ...

    def delete_rule(self, tenant_id: str, rule_id: str) -> None:
        ...

    def increment_blocked_count(self, tenant_id: str, domain: str) -> None:
        ...


def build_rule_set(rules: Iterable[DomainRule], tenant_id: str | None = None) -> DomainRuleSet:
    """Fold tenant rules into blocked, allowed and competitor buckets.

    ``trusted`` counts as allowed and ``competitor`` counts as blocked while
    also being tracked on its own. Inactive rules and unknown rule types are
    ignored.
    """

    blocked: List[str] = []
    allowed: List[str] = []
    competitor: List[str] = []

    for rule in rules:
        if not rule.active:
            continue
        if rule.rule_type == "blocked":
            blocked.append(rule.domain)
        elif rule.rule_type in ("allowed", "trusted"):
            allowed.append(rule.domain)
        elif rule.rule_type == "competitor":
            competitor.append(rule.domain)
            blocked.append(rule.domain)
        else:
            LOGGER.warning("Ignoring rule with unknown type %r for %s", rule.rule_type, rule.domain)

    return DomainRuleSet(
        blocked=DomainSuffixSet(blocked),
        allowed=DomainSuffixSet(allowed),
        competitor=DomainSuffixSet(competitor),
        tenant_id=tenant_id,
        source="tenant",
    )


class _PendingLoad:
    """Lock and invalidation counter shared by the loads of one tenant."""

    __slots__ = ("lock", "users", "generation")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0
        self.generation = 0


class RuleSetManager:
    """Loads, caches and invalidates per-tenant rule set snapshots.

    At most ``cache_size`` snapshots are kept; the least recently used
    tenant is evicted first and simply reloads on its next evaluation.
    """

    def __init__(
        self,
        store: RuleStore,
        config: EngineConfig | None = None,
        *,
        load_timeout: float | None = None,
        cache_size: int | None = None,
    ) -> None:
        self._store = store
        self._config = config or load_config(None)
        self._load_timeout = load_timeout if load_timeout is not None else self._config.rule_load_timeout
        self._cache_size = cache_size if cache_size is not None else self._config.rule_cache_size
        if self._cache_size < 1:
            raise ValueError(f"cache_size must be positive, got {self._cache_size}")
        self._cache: "OrderedDict[str, DomainRuleSet]" = OrderedDict()
        # Entries live only while a load for that tenant is running.
        self._pending: Dict[str, _PendingLoad] = {}
        self._guard = threading.Lock()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def load(self, tenant_id: str) -> DomainRuleSet:
        """Return the tenant's snapshot, fetching it from the store if needed.

        Concurrent loads for one tenant share a single fetch. A failed or
        timed out fetch returns the system defaults without caching them.
        """

        cached = self._cached(tenant_id)
        if cached is not None:
            return cached

        pending = self._join(tenant_id)
        try:
            with pending.lock:
                cached = self._cached(tenant_id)
                if cached is not None:
                    return cached

                with self._guard:
                    generation = pending.generation
                rule_set, cacheable = self._load_with_fallback(tenant_id)
                if cacheable:
                    self._publish(tenant_id, rule_set, pending, generation)
                return rule_set
        finally:
            self._leave(tenant_id, pending)

    def invalidate(self, tenant_id: str) -> None:
        """Drop the cached snapshot so the next load reads the store again."""

        with self._guard:
            self._cache.pop(tenant_id, None)
            pending = self._pending.get(tenant_id)
            if pending is not None:
                pending.generation += 1

    def reload(self, tenant_id: str) -> DomainRuleSet:
        self.invalidate(tenant_id)
        return self.load(tenant_id)

    def list_rules(self, tenant_id: str) -> List[DomainRule]:
        """Return every stored rule for the tenant, newest first."""

        try:
            return list(self._store.list_rules(tenant_id))
        except RuleStoreError as exc:
            LOGGER.warning("Could not list domain rules for tenant %s: %s", tenant_id, exc)
            return []

    def add_rule(
        self,
        tenant_id: str,
        domain: str,
        rule_type: str,
        reason: str | None = None,
    ) -> RuleMutationResult:
        """Persist a new rule and invalidate the tenant's snapshot."""

        normalized = normalize_domain(domain)
        if not normalized:
            return RuleMutationResult(success=False, error="A domain is required.")
        if rule_type not in RULE_TYPES:
            return RuleMutationResult(success=False, error=f"Unsupported rule type: {rule_type}")

        try:
            rule = self._store.insert_rule(tenant_id, normalized, rule_type, reason)
        except RuleStoreError as exc:
            LOGGER.warning("Adding %s rule for %s failed (tenant %s): %s", rule_type, normalized, tenant_id, exc)
            return RuleMutationResult(success=False, error=str(exc))

        self.invalidate(tenant_id)
        LOGGER.info("Added %s rule for %s (tenant %s)", rule_type, normalized, tenant_id)
        return RuleMutationResult(success=True, rule=rule)

    def remove_rule(self, tenant_id: str, rule_id: str) -> RuleMutationResult:
        """Delete a rule and invalidate the tenant's snapshot."""

        try:
            self._store.delete_rule(tenant_id, rule_id)
        except RuleStoreError as exc:
            LOGGER.warning("Removing rule %s failed (tenant %s): %s", rule_id, tenant_id, exc)
            return RuleMutationResult(success=False, error=str(exc))

        self.invalidate(tenant_id)
        LOGGER.info("Removed rule %s (tenant %s)", rule_id, tenant_id)
        return RuleMutationResult(success=True)

    def record_blocked_domains(self, tenant_id: str, result: ComplianceResult) -> None:
        """Bump the analytics counter for each blocked domain in ``result``.

        Best effort only: failures are logged at debug level and dropped.
        """

        for violation in result.violations:
            if violation.rule_type not in BLOCK_RULE_TYPES or not violation.domain:
                continue
            try:
                self._store.increment_blocked_count(tenant_id, violation.domain)
            except Exception as exc:
                LOGGER.debug("Could not increment block count for %s: %s", violation.domain, exc)

    def _cached(self, tenant_id: str) -> Optional[DomainRuleSet]:
        with self._guard:
            rule_set = self._cache.get(tenant_id)
            if rule_set is not None:
                self._cache.move_to_end(tenant_id)
            return rule_set

    def _join(self, tenant_id: str) -> _PendingLoad:
        with self._guard:
            pending = self._pending.get(tenant_id)
            if pending is None:
                pending = self._pending[tenant_id] = _PendingLoad()
            pending.users += 1
            return pending

    def _leave(self, tenant_id: str, pending: _PendingLoad) -> None:
        with self._guard:
            pending.users -= 1
            if pending.users == 0 and self._pending.get(tenant_id) is pending:
                del self._pending[tenant_id]

    def _publish(self, tenant_id: str, rule_set: DomainRuleSet, pending: _PendingLoad, generation: int) -> None:
        with self._guard:
            # An invalidate() during the fetch makes this result stale.
            if pending.generation != generation:
                return
            self._cache[tenant_id] = rule_set
            self._cache.move_to_end(tenant_id)
            while len(self._cache) > self._cache_size:
                evicted, _ = self._cache.popitem(last=False)
                LOGGER.debug("Evicted cached domain rules for tenant %s", evicted)

    def _load_with_fallback(self, tenant_id: str) -> Tuple[DomainRuleSet, bool]:
        """Fetch and compile tenant rules, degrading to the defaults.

        Returns the snapshot and whether it may be cached.
        """

        try:
            rules = self._fetch_active_rules(tenant_id)
        except FuturesTimeoutError:
            LOGGER.warning(
                "Loading domain rules for tenant %s timed out after %ss; using defaults",
                tenant_id,
                self._load_timeout,
            )
            return self._config.default_rule_set(tenant_id, source="fallback"), False
        except Exception as exc:
            LOGGER.warning("Error loading domain rules for tenant %s; using defaults: %s", tenant_id, exc)
            return self._config.default_rule_set(tenant_id, source="fallback"), False

        active = [rule for rule in rules if rule.active]
        if not active:
            LOGGER.info("No active domain rules for tenant %s; using defaults", tenant_id)
            return self._config.default_rule_set(tenant_id), True

        rule_set = build_rule_set(active, tenant_id)
        LOGGER.info(
            "Loaded %d domain rules for tenant %s (%d blocked, %d allowed)",
            len(active),
            tenant_id,
            len(rule_set.blocked),
            len(rule_set.allowed),
        )
        return rule_set, True

    def _fetch_active_rules(self, tenant_id: str) -> List[DomainRule]:
        if self._load_timeout is None:
            return list(self._store.list_active_rules(tenant_id))

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="linkguard-rules")
        try:
            future = executor.submit(self._store.list_active_rules, tenant_id)
            return list(future.result(timeout=self._load_timeout))
        finally:
            # A timed out fetch keeps running in the background; its result is dropped.
            executor.shutdown(wait=False)
