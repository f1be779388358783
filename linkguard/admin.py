from django.apps import apps
from django.contrib import admin

from .models import TenantDomainRule


@admin.register(TenantDomainRule)
class TenantDomainRuleAdmin(admin.ModelAdmin):
    list_display = ('domain', 'tenant_id', 'rule_type', 'is_active', 'times_blocked', 'created_at')
    list_filter = ('rule_type', 'is_active', 'tenant_id')
    search_fields = ('domain', 'tenant_id', 'reason')
    readonly_fields = ('times_blocked', 'created_at')

    # Admin edits bypass the rule set manager, so drop the cached snapshot.
    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        manager = apps.get_app_config('linkguard').rule_set_manager
        manager.invalidate(obj.tenant_id)
        previous_tenant = form.initial.get('tenant_id')
        if change and previous_tenant and previous_tenant != obj.tenant_id:
            manager.invalidate(previous_tenant)

    def delete_model(self, request, obj):
        tenant_id = obj.tenant_id
        super().delete_model(request, obj)
        apps.get_app_config('linkguard').rule_set_manager.invalidate(tenant_id)

    def delete_queryset(self, request, queryset):
        tenant_ids = set(queryset.values_list('tenant_id', flat=True))
        super().delete_queryset(request, queryset)
        manager = apps.get_app_config('linkguard').rule_set_manager
        for tenant_id in tenant_ids:
            manager.invalidate(tenant_id)
