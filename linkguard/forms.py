"""Forms for the linkguard app.

The forms validate the inputs of the compliance check and rule management
endpoints before they reach the engine.
"""

from __future__ import annotations

import re

from django import forms

from .engine.matching import normalize_domain
from .models import TenantDomainRule

_DOMAIN_RE = re.compile(r'^[a-z0-9_](?:[a-z0-9_-]*[a-z0-9_])?(?:\.[a-z0-9_](?:[a-z0-9_-]*[a-z0-9_])?)*$')


class ContentField(forms.CharField):
    """``CharField`` that drops NUL characters rather than rejecting the post."""

    def to_python(self, value):
        return super().to_python(value).replace('\x00', '')


class ComplianceCheckForm(forms.Form):
    """Content body submitted by the publishing pipeline for a check."""

    content = ContentField(
        required=False,
        strip=False,
        widget=forms.Textarea(attrs={'rows': 18}),
        label='Content',
        help_text='Assembled HTML of the article about to be published.',
    )


class DomainRuleForm(forms.Form):
    """Form used to add a domain rule for a tenant."""

    domain = forms.CharField(
        max_length=255,
        label='Domain',
        help_text='Host name such as example.com. Subdomains are matched too.',
    )
    rule_type = forms.ChoiceField(
        choices=TenantDomainRule.RULE_TYPE_CHOICES,
        label='Rule type',
    )
    reason = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 3}),
        label='Reason',
    )

    def clean_domain(self) -> str:
        """Reduce pasted URLs to a bare lowercase host."""

        raw_value = self.cleaned_data.get('domain', '')
        domain = normalize_domain(raw_value)
        if not domain:
            raise forms.ValidationError('Enter a domain such as example.com.')
        try:
            domain = domain.encode('idna').decode('ascii')
        except UnicodeError as exc:
            raise forms.ValidationError(f'"{raw_value}" is not a valid domain.') from exc
        if not _DOMAIN_RE.match(domain):
            raise forms.ValidationError(f'"{raw_value}" is not a valid domain.')
        return domain
