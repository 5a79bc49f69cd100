"""
Shared fixtures for KRN tests.
"""
import pytest

from krn.name import KRN
from krn.tests.shared_fixtures import *  # noqa: F401,F403


@pytest.fixture
def simple_krn() -> KRN:
    """Root-level KRN without service or version."""
    return KRN.parse("//kopexa.com/frameworks/iso27001")


@pytest.fixture
def nested_krn() -> KRN:
    """Two-level KRN with service and version."""
    return KRN.parse("//catalog.kopexa.com/frameworks/iso27001/controls/5.1.1@v2")


@pytest.fixture
def krn_repo(tmp_path):
    """
    Factory for a project root with a .krn/config.yaml.

    Usage:
        root = krn_repo("cli:\\n  format: json\\n")
    """
    def _make(config_text: str = ""):
        config_dir = tmp_path / ".krn"
        config_dir.mkdir(exist_ok=True)
        (config_dir / "config.yaml").write_text(config_text)
        return tmp_path
    return _make


@pytest.fixture
def no_fixtures_env(monkeypatch):
    """Make sure KRN_FIXTURES from the outer environment does not leak in."""
    monkeypatch.delenv("KRN_FIXTURES", raising=False)
