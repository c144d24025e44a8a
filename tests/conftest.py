"""
Root conftest for tests.

Ensures process-wide state (cached settings, the shared PMP client) never
leaks between tests.
"""

import pytest

from libs.pmp_client.factory import reset_pmp_client
from libs.pmp_client.settings import get_settings


@pytest.fixture(autouse=True)
def _reset_process_wide_state():
    get_settings.cache_clear()
    reset_pmp_client()
    yield
    reset_pmp_client()
    get_settings.cache_clear()
