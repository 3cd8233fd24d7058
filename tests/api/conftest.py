# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from popglobe.api.server import create_app


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def live(client):
    """Client with a session already created at the default size."""
    resp = client.post("/v1/session", json={})
    assert resp.status_code == 200, resp.text
    return client
