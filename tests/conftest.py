"""
Shared test fixtures for Mirth Channel Report.

Provides the sample channel exports and helpers reused across test modules.
"""

import sys
from pathlib import Path

import pytest

# Ensure the project root is importable
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mirth_report.config_loader import ConfigLoader, ReportConfig
from mirth_report.mirth.channel_parser import ChannelParser
from mirth_report.mirth.models import Channel

# Sample channel exports
SAMPLES_DIR = PROJECT_ROOT / "samples" / "mirth"
ADT_XML = SAMPLES_DIR / "ADT_Inbound.xml"
LAB_XML = SAMPLES_DIR / "Lab_Results_Email.xml"
CONFIG_DIR = PROJECT_ROOT / "config"


@pytest.fixture(scope="session")
def samples_dir() -> Path:
    """Directory of sample exports, including a nested folder."""
    assert SAMPLES_DIR.is_dir(), f"Samples not found at {SAMPLES_DIR}"
    return SAMPLES_DIR


@pytest.fixture(scope="session")
def adt_channel() -> Channel:
    """Parse the enabled ADT Inbound sample (session-scoped for speed)."""
    return ChannelParser(ADT_XML).parse()


@pytest.fixture(scope="session")
def lab_channel() -> Channel:
    """Parse the disabled Lab Results Email sample."""
    return ChannelParser(LAB_XML).parse()


@pytest.fixture(scope="session")
def report_config() -> ReportConfig:
    """The shipped report configuration."""
    return ConfigLoader(CONFIG_DIR).load_config()


@pytest.fixture
def write_channel(tmp_path):
    """Write a channel document under tmp_path and return its path."""
    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write
