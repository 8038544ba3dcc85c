"""
tests/conftest.py — Shared fixtures and path setup for all tests.

Adds the project root to sys.path so unit tests can import:
    from config.settings import Settings
    from check_up.manifest import ServiceSpec
    from scripts.run_checks import main
"""
import io
import pathlib
import sys

import pytest

# Make project root importable without installing as a package
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from check_up.reporter import Reporter  # noqa: E402


@pytest.fixture
def sink():
    return io.StringIO()


@pytest.fixture
def verbose_reporter(sink):
    return Reporter(sink=sink, verbose=True)


@pytest.fixture
def quiet_reporter(sink):
    return Reporter(sink=sink, verbose=False)
