"""Database models for the linkguard app.

Each tenant keeps its own list of domain rules. An empty list means the
tenant uses the system defaults; any active rule replaces the defaults
entirely for that tenant.
"""

from __future__ import annotations

from django.db import models


class TenantDomainRule(models.Model):
    """A blocked, allowed, competitor or trusted domain for one tenant."""

    BLOCKED = 'blocked'
    ALLOWED = 'allowed'
    COMPETITOR = 'competitor'
    TRUSTED = 'trusted'
    RULE_TYPE_CHOICES = [
        (BLOCKED, 'Blocked'),
        (ALLOWED, 'Allowed'),
        (COMPETITOR, 'Competitor'),
        (TRUSTED, 'Trusted'),
    ]

    tenant_id = models.CharField(max_length=64, db_index=True)
    domain = models.CharField(max_length=255)
    rule_type = models.CharField(max_length=16, choices=RULE_TYPE_CHOICES)
    reason = models.TextField(blank=True)
    match_subdomains = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    times_blocked = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant_id', 'domain', 'rule_type'],
                name='unique_tenant_domain_rule',
            ),
        ]
        indexes = [
            models.Index(fields=['tenant_id', 'rule_type'], name='domain_rules_tenant_type'),
        ]

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.tenant_id} · {self.rule_type} · {self.domain}"
