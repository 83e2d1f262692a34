import logging
import os

import pytest

from mailgrid_ui.engine import register_engine
from mailgrid_ui.schemas import UIRequest


class RecordingEngine:
    """Engine double that records requests and what their files held at call time."""

    def __init__(self, returns=None, raises=None):
        self.returns = returns
        self.raises = raises
        self.requests = []
        self.file_contents = []

    def __call__(self, request):
        self.requests.append(request)
        snapshot = {}
        for path in (request.template_path, request.csv_path):
            if path and os.path.exists(path):
                with open(path, encoding="utf-8", newline="") as f:
                    snapshot[path] = f.read()
        self.file_contents.append(snapshot)
        if self.raises is not None:
            raise self.raises
        return self.returns

    @property
    def last(self):
        return self.requests[-1]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "mailgrid_home"
    monkeypatch.setenv("MAILGRID_UI_HOME", str(home))
    register_engine(None)
    yield home
    register_engine(None)
    package_logger = logging.getLogger("mailgrid_ui")
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / "smtp.json"
    path.write_text('{"host": "smtp.example.com", "port": 587}')
    return str(path)


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "artifacts"
    path.mkdir()
    return str(path)


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def ui_request(env_file):
    return UIRequest(env_path=env_file, template_path="template.html", csv_path="recipients.csv")


@pytest.fixture
def make_engine():
    return RecordingEngine
