"""Django views for the linkguard app.

JSON endpoints used by the publishing pipeline: run a compliance check on
a content body and manage a tenant's domain rules. Tenant resolution is the
caller's job, so the tenant id is part of each URL.
"""

from __future__ import annotations

import logging

from django.apps import apps
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from .engine.evaluate import ComplianceEvaluator
from .engine.rules import RuleSetManager
from .forms import ComplianceCheckForm, DomainRuleForm

LOGGER = logging.getLogger(__name__)


def _manager() -> RuleSetManager:
    return apps.get_app_config('linkguard').rule_set_manager


def _evaluator() -> ComplianceEvaluator:
    return apps.get_app_config('linkguard').evaluator


def _form_errors(form) -> JsonResponse:
    return JsonResponse({'errors': form.errors.get_json_data()}, status=400)


@login_required
@require_POST
def check_compliance(request: HttpRequest, tenant_id: str) -> HttpResponse:
    """Evaluate the posted content against the tenant's domain rules.

    A non-compliant result is still a 200 response: ``is_compliant`` false is
    the caller's signal to block publishing.
    """

    form = ComplianceCheckForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    result = _evaluator().evaluate(tenant_id, form.cleaned_data['content'])
    if result.blocked_count:
        LOGGER.info(
            'Compliance check for tenant %s found %d blocking violation(s)',
            tenant_id,
            result.blocked_count,
        )
        _manager().record_blocked_domains(tenant_id, result)
    return JsonResponse(result.to_dict())


@login_required
@require_http_methods(['GET', 'POST'])
def domain_rules(request: HttpRequest, tenant_id: str) -> HttpResponse:
    """List the tenant's rules or add a new one."""

    manager = _manager()
    if request.method == 'GET':
        rules = manager.list_rules(tenant_id)
        return JsonResponse({'rules': [rule.to_dict() for rule in rules]})

    form = DomainRuleForm(request.POST)
    if not form.is_valid():
        return _form_errors(form)

    outcome = manager.add_rule(
        tenant_id,
        form.cleaned_data['domain'],
        form.cleaned_data['rule_type'],
        form.cleaned_data['reason'] or None,
    )
    if not outcome.success:
        return JsonResponse({'success': False, 'error': outcome.error}, status=400)
    payload = {'success': True, 'rule': outcome.rule.to_dict() if outcome.rule else None}
    return JsonResponse(payload, status=201)


@login_required
@require_POST
def delete_domain_rule(request: HttpRequest, tenant_id: str, rule_id: int) -> HttpResponse:
    """Remove one of the tenant's rules."""

    outcome = _manager().remove_rule(tenant_id, str(rule_id))
    if not outcome.success:
        return JsonResponse({'success': False, 'error': outcome.error}, status=400)
    return JsonResponse({'success': True})
