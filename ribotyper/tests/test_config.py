#!/usr/bin/env python3
"""
Tests for configuration loading and classification options
"""

import json

import pytest
import yaml

from ribotyper.config import ConfigManager
from ribotyper.exceptions import ConfigurationError
from ribotyper.models.options import ClassificationOptions


class TestConfigManager:
    """Layered configuration"""

    def test_defaults(self):
        config = ConfigManager()
        assert config.get("classification.min_score") == 20.0
        assert config.get_search_method() == "cmsearch-fast"
        assert config.get("classification.missing", "x") == "x"
        assert set(config.config) == {"search", "logging", "classification"}

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "ribotyper.yml"
        path.write_text(yaml.safe_dump({
            'search': {'method': 'nhmmer'},
            'classification': {'total_coverage': 0.9, 'mult_fail': True},
        }))
        config = ConfigManager(str(path))

        assert config.get_search_method() == "nhmmer"
        assert config.get("classification.total_coverage") == 0.9
        assert config.get("classification.min_score") == 20.0

    def test_local_override(self, tmp_path):
        (tmp_path / "ribotyper.yml").write_text("classification:\n  max_overlap: 5\n")
        (tmp_path / "ribotyper.local.yml").write_text("classification:\n  max_overlap: 7\n")

        config = ConfigManager(str(tmp_path / "ribotyper.yml"))
        assert config.get("classification.max_overlap") == 7

    def test_json_file(self, tmp_path):
        path = tmp_path / "ribotyper.json"
        path.write_text(json.dumps({'classification': {'same_model': True}}))
        assert ConfigManager(str(path)).get("classification.same_model") is True

    def test_environment_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RIBO_CLASSIFICATION__MIN_SCORE", "35.5")
        monkeypatch.setenv("RIBO_CLASSIFICATION__COV_FAIL", "true")

        config = ConfigManager()
        assert config.get("classification.min_score") == 35.5
        assert config.get("classification.cov_fail") is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigManager(str(tmp_path / "missing.yml"))

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("classification: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_schema_type_error(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("classification:\n  max_overlap: lots\n  cov_fail: 1\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(str(path))

        errors = exc_info.value.details['errors']
        assert any("classification.max_overlap" in e for e in errors)
        assert any("classification.cov_fail" in e for e in errors)

    def test_unknown_log_level(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("logging:\n  level: LOUD\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigManager(str(path))
        assert "logging.level" in exc_info.value.details['errors'][0]

    def test_bool_rejected_for_numbers(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("classification:\n  total_coverage: true\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))


class TestClassificationOptions:
    """Options dataclass"""

    def test_defaults(self):
        options = ClassificationOptions()
        options.validate()
        assert options.low_diff_threshold == 0.10
        assert options.vlow_diff_threshold == 0.04

    def test_absolute_thresholds(self):
        options = ClassificationOptions(absolute_diff=True)
        assert options.low_diff_threshold == 100.0
        assert options.vlow_diff_threshold == 40.0

    @pytest.mark.parametrize("kwargs", [
        {'min_score': -1.0},
        {'max_overlap': -1},
        {'total_coverage': 1.5},
        {'low_ppos_diff': 0.01, 'vlow_ppos_diff': 0.02},
        {'low_abs_diff': 10.0, 'vlow_abs_diff': 20.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            ClassificationOptions(**kwargs).validate()

    def test_from_config_with_overrides(self, tmp_path):
        path = tmp_path / "ribotyper.yml"
        path.write_text("classification:\n  min_score: 30\n  diff_fail: true\n")

        options = ClassificationOptions.from_config(ConfigManager(str(path)),
                                                    total_coverage=0.5, mult_fail=None)

        assert options.min_score == 30
        assert options.diff_fail is True
        assert options.total_coverage == 0.5
        assert options.mult_fail is False

    def test_dict_round_trip_ignores_unknown_keys(self):
        data = ClassificationOptions(max_overlap=3).to_dict()
        data['unknown'] = 1
        assert ClassificationOptions.from_dict(data) == ClassificationOptions(max_overlap=3)
