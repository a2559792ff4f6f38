"""
Общие фикстуры: корень проекта в sys.path, без реальных PUSHBULLET_* переменных.
"""

import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("PUSHBULLET_ACCESS_TOKEN", "PUSHBULLET_API_URL", "PUSHBULLET_ENV_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_response():
    def _make(status_code, text=""):
        resp = requests.Response()
        resp.status_code = status_code
        resp._content = text.encode("utf-8")
        resp.encoding = "utf-8"
        return resp

    return _make
