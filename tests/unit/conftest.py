from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Host environment must not leak into config/connector tests.
    from services.api.app.settings import ENV_VARS

    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("CONFIG_PATH", raising=False)
