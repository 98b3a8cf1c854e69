import pytest

from logics.config import DEFAULT_GEOMETRY, DEFAULT_SERVICE_URL, DEFAULT_TIMEOUT, AppConfig


def test_defaults():
    config = AppConfig.from_env({})
    assert config.service_url == DEFAULT_SERVICE_URL
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.geometry == DEFAULT_GEOMETRY


def test_overrides():
    config = AppConfig.from_env({
        'ANALYSIS_SERVICE_URL': 'http://analysis.local:8080/',
        'ANALYSIS_TIMEOUT': '2.5',
        'ANALYSIS_WINDOW_GEOMETRY': '800x600',
    })
    assert config.service_url == 'http://analysis.local:8080'
    assert config.timeout == 2.5
    assert config.geometry == '800x600'


@pytest.mark.parametrize("raw", ["0", "", "  "])
def test_timeout_disabled(raw):
    assert AppConfig.from_env({'ANALYSIS_TIMEOUT': raw}).timeout is None


@pytest.mark.parametrize("raw", ["soon", "-1"])
def test_bad_timeout(raw):
    with pytest.raises(ValueError):
        AppConfig.from_env({'ANALYSIS_TIMEOUT': raw})
