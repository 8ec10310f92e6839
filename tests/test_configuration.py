"""Tests for device configuration lookup."""
import pytest

from core.configuration import resolve_config
from core.errors import ConfigurationNotFoundError, NotFoundError
from tests.conftest import DEVICE, configuration, message


class TestResolveConfig:
    def test_matches_device(self):
        entries = [
            configuration("cfg-other", device="OTHER", channel="#elsewhere"),
            configuration("cfg-1", channel="#office", testChannel="#office-test"),
        ]
        config = resolve_config(entries, DEVICE)
        assert config.device_id == DEVICE
        assert config.primary_channel == "#office"
        assert config.test_channel == "#office-test"

    def test_missing_test_channel_omitted(self):
        config = resolve_config([configuration("cfg-1")], DEVICE)
        assert config.test_channel is None

    def test_first_match_wins(self):
        entries = [
            configuration("cfg-1", channel="#first"),
            configuration("cfg-2", channel="#second"),
        ]
        assert resolve_config(entries, DEVICE).primary_channel == "#first"

    def test_not_found_names_device(self):
        entries = [configuration("cfg-1"), message("m", "Hello")]
        with pytest.raises(ConfigurationNotFoundError, match="Z9") as exc_info:
            resolve_config(entries, "Z9")
        assert exc_info.value.device_id == "Z9"
        assert isinstance(exc_info.value, NotFoundError)

    def test_channel_for_test_run(self):
        config = resolve_config([configuration("cfg-1", channel="#main", testChannel="#qa")], DEVICE)
        assert config.channel_for(test=False) == "#main"
        assert config.channel_for(test=True) == "#qa"

    def test_channel_for_test_run_falls_back_to_primary(self):
        config = resolve_config([configuration("cfg-1", channel="#main")], DEVICE)
        assert config.channel_for(test=True) == "#main"
