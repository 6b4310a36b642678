"""Pytest configuration and fixtures for the document wizard tests.

Provides a scripted completion client, an in-memory credential store and a Flask test client.
"""

import pytest

from app import create_app
from docwizard.credential_store import MemoryCredentialStore
from docwizard.wizard import Wizard


class FakeCompletionClient:
    """Stands in for CompletionClient: returns scripted replies and records every call."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def complete(self, credential, instruction):
        self.calls.append({"credential": credential, "instruction": instruction})
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def completion():
    return FakeCompletionClient()


@pytest.fixture
def store():
    return MemoryCredentialStore("sk-test")


@pytest.fixture
def empty_store():
    return MemoryCredentialStore()


@pytest.fixture
def wizard(store, completion):
    return Wizard(store, completion_client=completion)


@pytest.fixture
def app(store, completion):
    flask_app = create_app(credential_store=store, completion_client=completion)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
