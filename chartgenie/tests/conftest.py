"""Shared fixtures for ChartGenie tests."""

import pytest

from chartgenie.config.settings import Settings
from chartgenie.errors import LLMCallError

SHOP_DIAGRAM = """erDiagram
    USER {
        int user_id PK
        string username
        string email
    }
    PRODUCT {
        int product_id PK
        string name
        decimal price
    }
    USER ||--o{ PRODUCT : lists"""


class FakeChat:
    """Stand-in for the LLM client that records the messages it receives."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_user_prompt(self):
        return self.calls[-1][-1]["content"]


@pytest.fixture
def shop_diagram():
    return SHOP_DIAGRAM


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def failing_chat():
    return FakeChat(error=LLMCallError("No LLM API configured"))
