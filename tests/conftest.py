import pytest

from tripplanner.config import load_config
from tripplanner.server import create_app


class FakeModelClient:
    """Records prompts; raises the queued errors first, then returns `reply`."""

    def __init__(self, reply="Day 1: Botanical Garden", errors=None):
        self.reply = reply
        self.errors = list(errors or [])
        self.prompts = []

    @property
    def calls(self):
        return len(self.prompts)

    def invoke(self, prompt):
        self.prompts.append(prompt)
        if self.errors:
            raise self.errors.pop(0)
        return self.reply


@pytest.fixture
def settings():
    return load_config({"MISTRAL_API_KEY": "test-key", "NODE_ENV": "development"})


@pytest.fixture
def fake_client():
    return FakeModelClient()


@pytest.fixture
def app(settings, fake_client):
    return create_app(settings, model_client=fake_client)


@pytest.fixture
def client(app):
    return app.test_client()
