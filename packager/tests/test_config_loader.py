# Path: packager/tests/test_config_loader.py
"""
Unit tests for the configuration loader.

Tests:
- Singleton instance
- Environment overrides with type conversion
- Invalid numbers fall back to defaults
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from packager.core.config_loader import ConfigLoader
from packager.constants import DEFAULT_MAX_REDIRECTS, DEFAULT_MOVE_RETRIES


def test_singleton():
    assert ConfigLoader() is ConfigLoader()


def test_environment_overrides(tmp_path, monkeypatch):
    config = ConfigLoader()

    monkeypatch.setenv('PACKAGER_WORKSPACE_DIR', str(tmp_path))
    monkeypatch.setenv('PACKAGER_MAX_REDIRECTS', '2')
    monkeypatch.setenv('PACKAGER_MOVE_RETRIES', 'three')
    monkeypatch.setenv('PACKAGER_MOVE_RETRY_DELAY', '0.25')
    monkeypatch.setenv('PACKAGER_API_BASE_URL', 'http://localhost:8080/api/')
    monkeypatch.setenv('PACKAGER_LOG_CONSOLE', 'off')

    try:
        config.reload()

        assert config['workspace_dir'] == tmp_path
        assert config.get('templates_dir') == tmp_path / 'setupFiles'
        assert config.get('max_redirects') == 2
        assert config.get('move_retries') == DEFAULT_MOVE_RETRIES
        assert config.get('move_retry_delay') == 0.25
        assert config.get('api_base_url') == 'http://localhost:8080/api'
        assert config.get('log_console') is False
        assert 'compiler_path' in config
    finally:
        monkeypatch.undo()
        config.reload()

    assert config.get('max_redirects') == DEFAULT_MAX_REDIRECTS
