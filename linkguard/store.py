"""Django ORM implementation of the engine's rule store.

These functions encapsulate every database touch the compliance engine
needs so the engine itself stays free of Django imports. Database failures
are re-raised as :class:`~linkguard.engine.rules.RuleStoreError` so the
rule set manager can apply its fallback policy.
"""

from __future__ import annotations

from typing import List, Optional

from django.db import DatabaseError, IntegrityError, connection, transaction
from django.db.models import F

from .engine.matching import host_suffixes
from .engine.rules import BLOCK_RULE_TYPES, RuleStoreError
from .engine.types import DomainRule
from .models import TenantDomainRule


def rule_from_model(instance: TenantDomainRule) -> DomainRule:
    """Convert a ``TenantDomainRule`` row into the engine's value type."""

    return DomainRule(
        id=str(instance.pk),
        tenant_id=instance.tenant_id,
        domain=instance.domain,
        rule_type=instance.rule_type,
        reason=instance.reason or None,
        match_subdomains=instance.match_subdomains,
        active=instance.is_active,
        times_blocked=instance.times_blocked,
        created_at=instance.created_at,
    )


class DjangoRuleStore:
    """Rule store backed by the ``TenantDomainRule`` table.

    When rule loads run on a worker thread (a load timeout is configured),
    ``close_connection_after_load`` closes that thread's database connection
    once the read finishes so abandoned workers do not leak connections.
    """

    def __init__(self, *, close_connection_after_load: bool = False) -> None:
        self._close_connection_after_load = close_connection_after_load

    def list_active_rules(self, tenant_id: str) -> List[DomainRule]:
        try:
            rows = TenantDomainRule.objects.filter(tenant_id=tenant_id, is_active=True).order_by('id')
            return [rule_from_model(row) for row in rows]
        except DatabaseError as exc:
            raise RuleStoreError(f'Could not read domain rules: {exc}') from exc
        finally:
            if self._close_connection_after_load:
                connection.close()

    def list_rules(self, tenant_id: str) -> List[DomainRule]:
        try:
            rows = TenantDomainRule.objects.filter(tenant_id=tenant_id).order_by('-created_at', '-id')
            return [rule_from_model(row) for row in rows]
        except DatabaseError as exc:
            raise RuleStoreError(f'Could not read domain rules: {exc}') from exc

    def insert_rule(
        self,
        tenant_id: str,
        domain: str,
        rule_type: str,
        reason: Optional[str] = None,
    ) -> DomainRule:
        try:
            with transaction.atomic():
                row = TenantDomainRule.objects.create(
                    tenant_id=tenant_id,
                    domain=domain.lower(),
                    rule_type=rule_type,
                    reason=reason or '',
                    match_subdomains=True,
                    is_active=True,
                )
        except IntegrityError as exc:
            raise RuleStoreError(f'A {rule_type} rule for {domain} already exists.') from exc
        except DatabaseError as exc:
            raise RuleStoreError(f'Could not save domain rule: {exc}') from exc
        return rule_from_model(row)

    def delete_rule(self, tenant_id: str, rule_id: str) -> None:
        try:
            pk = int(rule_id)
        except (TypeError, ValueError) as exc:
            raise RuleStoreError(f'Invalid rule id: {rule_id!r}') from exc

        try:
            deleted, _ = TenantDomainRule.objects.filter(pk=pk, tenant_id=tenant_id).delete()
        except DatabaseError as exc:
            raise RuleStoreError(f'Could not delete domain rule: {exc}') from exc
        if not deleted:
            raise RuleStoreError(f'Rule {rule_id} not found.')

    def increment_blocked_count(self, tenant_id: str, domain: str) -> None:
        """Count a blocked link against the rule covering ``domain``.

        ``domain`` is the link host, so parent domains are matched as well.
        """

        try:
            TenantDomainRule.objects.filter(
                tenant_id=tenant_id,
                domain__in=list(host_suffixes(domain.lower())),
                rule_type__in=BLOCK_RULE_TYPES,
                is_active=True,
            ).update(times_blocked=F('times_blocked') + 1)
        except DatabaseError as exc:
            raise RuleStoreError(f'Could not update block count: {exc}') from exc
