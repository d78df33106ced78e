from unittest.mock import Mock

import pytest

from github_slack_notifier.slack_utils import SlackWebhookSender

from .helpers import ISSUE_URL, make_event, make_response


@pytest.fixture
def issue_event() -> dict:
    return make_event({"action": "opened", "issue": {"html_url": ISSUE_URL, "number": 42}})


@pytest.fixture
def sender() -> Mock:
    """A sender whose Slack endpoint always accepts the message."""
    mock_sender = Mock(spec=SlackWebhookSender)
    mock_sender.send.return_value = make_response()
    return mock_sender
