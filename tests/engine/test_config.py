from __future__ import annotations

import pytest

from linkguard.engine.config import DEFAULTS, load_config


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.yml")

    assert config.default_blocked_domains == DEFAULTS["default_blocked_domains"]
    assert "aacsb.edu" in config.default_allowed_domains
    assert config.rule_load_timeout is None


def test_yaml_lists_replace_defaults(tmp_path):
    path = tmp_path / "linkguard.yml"
    path.write_text(
        "default_blocked_domains:\n  - rival.com\nrule_load_timeout: 2.5\n",
        encoding="utf-8",
    )

    config = load_config(path)
    rule_set = config.default_rule_set("acme")

    assert config.default_blocked_domains == ["rival.com"]
    assert config.default_allowed_domains == DEFAULTS["default_allowed_domains"]
    assert config.rule_load_timeout == 2.5
    assert list(rule_set.blocked) == ["rival.com"]
    assert rule_set.tenant_id == "acme"
    assert rule_set.source == "defaults"


def test_loading_does_not_mutate_defaults(tmp_path):
    path = tmp_path / "linkguard.yml"
    path.write_text("default_allowed_domains: []\n", encoding="utf-8")

    load_config(path)

    assert DEFAULTS["default_allowed_domains"]


@pytest.mark.parametrize(
    "text",
    ["- just\n- a list\n", "default_blocked_domains: forbes.com\n", "rule_cache_size: 0\n"],
)
def test_malformed_config_is_rejected(tmp_path, text):
    path = tmp_path / "linkguard.yml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)
