"""Shared fixtures: a fresh ledger and Flask app per test."""

import pytest

from splitbill.app import create_app
from splitbill.ledger import Ledger


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def app(ledger):
    app = create_app(ledger)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
