"""Tests for rule configuration loading."""

import pytest
from pydantic import ValidationError

from manachess.config import DEFAULT_CONFIG_PATH, RulesConfig, load_config


class TestRulesConfig:
    def test_defaults(self):
        config = RulesConfig()
        assert config.charge.cost == 2
        assert config.charge.cooldown == 2
        assert config.bulwark.cost == 1
        assert config.root_duration == 2
        assert config.shield_duration == 1

    def test_shipped_yaml_matches_defaults(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert load_config() == RulesConfig()

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("charge:\n  cost: 3\n  cooldown: 5\nroot_duration: 4\n")
        config = load_config(path)
        assert config.charge.cost == 3
        assert config.charge.cooldown == 5
        assert config.root_duration == 4
        assert config.bulwark == RulesConfig().bulwark

    def test_nested_under_rules_key(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  max_mana:\n    white: 5\n    black: 5\n")
        config = load_config(path)
        assert config.max_mana.white == 5

    def test_asymmetric_cap(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("max_mana:\n  white: 2\n  black: 3\n")
        config = load_config(path)
        assert (config.max_mana.white, config.max_mana.black) == (2, 3)
        assert RulesConfig().max_mana.white == RulesConfig().max_mana.black == 3

    def test_empty_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("")
        assert load_config(path) == RulesConfig()

    def test_negative_cost_rejected(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("bulwark:\n  cost: -1\n  cooldown: 2\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_starting_mana_above_cap_rejected(self):
        with pytest.raises(ValidationError):
            RulesConfig(starting_mana={"white": 4, "black": 0},
                        max_mana={"white": 3, "black": 3})
