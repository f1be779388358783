"""URL configuration for the linkguard app.

This module defines the URL patterns for the app's views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'linkguard'

urlpatterns = [
    path('tenants/<str:tenant_id>/compliance/', views.check_compliance, name='check_compliance'),
    path('tenants/<str:tenant_id>/rules/', views.domain_rules, name='domain_rules'),
    path(
        'tenants/<str:tenant_id>/rules/<int:rule_id>/delete/',
        views.delete_domain_rule,
        name='delete_domain_rule',
    ),
]
