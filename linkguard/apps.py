from __future__ import annotations

import yaml
from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class LinkguardConfig(AppConfig):
    """Configuration for the linkguard Django app.

    Builds the rule set manager and evaluator once per process; views read
    them from this config instead of constructing their own.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'linkguard'

    def ready(self) -> None:
        from .engine.config import load_config
        from .engine.evaluate import ComplianceEvaluator
        from .engine.rules import RuleSetManager
        from .store import DjangoRuleStore

        config_path = getattr(settings, 'LINKGUARD_CONFIG', None)
        try:
            engine_config = load_config(config_path)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ImproperlyConfigured(f'Invalid LINKGUARD_CONFIG ({config_path}): {exc}') from exc

        load_timeout = getattr(settings, 'LINKGUARD_RULE_LOAD_TIMEOUT', None)
        if load_timeout is None:
            load_timeout = engine_config.rule_load_timeout
        store = DjangoRuleStore(close_connection_after_load=load_timeout is not None)
        self.rule_set_manager = RuleSetManager(store, engine_config, load_timeout=load_timeout)
        self.evaluator = ComplianceEvaluator(self.rule_set_manager)
