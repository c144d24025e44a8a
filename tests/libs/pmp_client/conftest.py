"""Shared fixtures for PMP client tests."""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx
from pmp_fakes import (
    BASE_URL,
    START_TIME,
    VALID_CONFIG,
    FakeClock,
    accounts_body,
    password_body,
    resources_body,
    touch,
)

from libs.pmp_client.service import PMPAPIClientService
from libs.pmp_client.settings import PMPClientSettings


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("APPSETTINGS_DIRECTORY", str(tmp_path))
    return tmp_path


@pytest.fixture()
def write_config(config_dir: Path):
    """Write the config file and pin its mtime (defaults to before START_TIME)."""

    def _write(
        content: dict[str, Any] | str | None = None,
        mtime: datetime = START_TIME - timedelta(minutes=5),
    ) -> Path:
        path = config_dir / "PMPAPIClient_config.json"
        if content is None:
            content = VALID_CONFIG
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        touch(path, mtime)
        return path

    return _write


@pytest.fixture()
def settings() -> PMPClientSettings:
    return PMPClientSettings(_env_file=None)


@pytest.fixture()
def vault():
    """respx router standing in for the PMP REST API."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def standard_vault(vault):
    """One Application resource holding svc_reporting_db, plus a non-Application resource."""
    return {
        "resources": vault.get(f"{BASE_URL}/resources").mock(
            return_value=httpx.Response(
                200, json=resources_body(("301", "Application"), ("302", "Windows"))
            )
        ),
        "accounts": vault.get(f"{BASE_URL}/resources/301/accounts").mock(
            return_value=httpx.Response(200, json=accounts_body("301", ("902", "svc_reporting_db")))
        ),
        "windows_accounts": vault.get(f"{BASE_URL}/resources/302/accounts").mock(
            return_value=httpx.Response(200, json=accounts_body("302", ("903", "svc_admin")))
        ),
        "password": vault.get(f"{BASE_URL}/resources/301/accounts/902/password").mock(
            return_value=httpx.Response(200, json=password_body("Tr0ub4dor&3"))
        ),
    }


@pytest.fixture()
def service(settings: PMPClientSettings, clock: FakeClock):
    client = PMPAPIClientService(settings=settings, clock=clock)
    yield client
    client.close()
