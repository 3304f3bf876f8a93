"""Test configuration and fixtures."""

import pytest

from botgate import create_app
from botgate.services.guard.reverse_dns import ReverseLookup


class FakeResolver:
    """Deterministic stand-in for the async reverse-DNS resolver.

    Answers from a per-address table, falling back to `default`, and records
    every address it was asked about.
    """

    def __init__(self, answers=None, default=None):
        self.answers = dict(answers or {})
        self.default = default if default is not None else ReverseLookup.resolved(())
        self.calls = []

    async def reverse(self, address):
        self.calls.append(address)
        return self.answers.get(address, self.default)


@pytest.fixture
def make_resolver():
    """Factory for fake resolvers: make_resolver(answers, default=...)."""
    return FakeResolver


@pytest.fixture
def resolver(make_resolver):
    """Resolver shared by the app fixture; tests add answers as needed."""
    return make_resolver()


@pytest.fixture
def app(resolver):
    """Create application for testing."""
    app = create_app('testing', resolver=resolver)

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Test client for making requests."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """CLI test runner."""
    return app.test_cli_runner()
