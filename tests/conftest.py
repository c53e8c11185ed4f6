"""Top-level pytest configuration.

Layout:
    tests/
    ├── unit/                  # fullfuel_auth, fullfuel_config and CLI units
    ├── fullfuel_identity/     # user domain, auth service, repository
    ├── integration/api/       # HTTP tests against the FastAPI app
    └── shared/fixtures/       # database, Google token and app helpers

Tests marked ``integration`` start a PostgreSQL container and are skipped
unless ``--run-integration`` (or ``RUN_INTEGRATION=1``) is given.
``--run-all`` / ``RUN_ALL_TESTS=1`` lifts every skip.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from fullfuel_config import clear_settings_cache

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

for env_file in (CONFIG_DIR / ".env.dev", CONFIG_DIR / ".env"):
    if env_file.exists():
        load_dotenv(env_file)
        break


def _enabled(config, option: str, variable: str) -> bool:
    if config.getoption(option):
        return True
    return os.environ.get(variable, "").lower() in ("1", "true", "yes")


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: needs a PostgreSQL container (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    if _enabled(config, "--run-all", "RUN_ALL_TESTS"):
        return
    if _enabled(config, "--run-integration", "RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="needs PostgreSQL; run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        if any(mark.name == "integration" for mark in item.iter_markers()):
            item.add_marker(skip_integration)


@pytest.fixture(scope="session", autouse=True)
def fresh_settings_cache():
    """Start and finish the session with no cached settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()
