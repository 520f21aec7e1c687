"""Shared pytest fixtures."""

import os

import pytest
import yaml

import authtoken.config as config_mod


@pytest.fixture
def secret():
    return b"secret"


@pytest.fixture
def temp_config_yaml(tmp_path):
    """Create a temporary authtoken.yaml file for testing."""
    config_path = tmp_path / "authtoken.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate each test from AUTHTOKEN_* env vars, .env files and cached settings."""
    for key in list(os.environ):
        if key.startswith("AUTHTOKEN_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    config_mod._config_path_override = None
    config_mod.clear_settings_cache()
    yield
    config_mod._config_path_override = None
    config_mod.clear_settings_cache()
