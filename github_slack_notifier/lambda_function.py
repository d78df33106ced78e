import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .exceptions import MissingConfigurationError
from .slack_utils import (
    SLACK_URL_ENV,
    SLACK_URL_PARAM_ENV,
    SlackWebhookSender,
    extract_issue_url,
    format_issue_created_message,
    parse_github_event_body,
    resolve_slack_url,
)

DEFAULT_LOG_LEVEL = 'INFO'


def configure_logging(environ: Mapping[str, str] = os.environ) -> logging.Logger:
    """Sets the root logger level from LOG_LEVEL, falling back to INFO."""
    root = logging.getLogger()
    level = environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL).upper()
    try:
        root.setLevel(level)
    except ValueError:
        root.setLevel(DEFAULT_LOG_LEVEL)
        root.warning(f"Ignoring invalid LOG_LEVEL={level!r}, using {DEFAULT_LOG_LEVEL}")
    return root


# Configure logging
logger = configure_logging()

SUCCESS_BODY = "Notification sent to Slack"


@dataclass(frozen=True)
class ForwarderConfig:
    """
    Destination settings for one invocation.

    Only raw values are held here; an SSM lookup, if any, happens in
    resolve_slack_url() once the request body has been validated.
    """

    slack_url: Optional[str] = None
    slack_url_param: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] = os.environ) -> "ForwarderConfig":
        return cls(
            slack_url=environ.get(SLACK_URL_ENV) or None,
            slack_url_param=environ.get(SLACK_URL_PARAM_ENV) or None,
        )

    def resolve_slack_url(self) -> Optional[str]:
        return resolve_slack_url(self.slack_url, self.slack_url_param)


def _response(status_code: int, body: str) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'body': body
    }


class WebhookForwarder:
    """
    Turns one GitHub issue webhook delivery into one Slack notification.

    The sender is shared across invocations; the config is passed per call
    so the destination URL is re-read on every request.
    """

    def __init__(self, sender: SlackWebhookSender):
        self.sender = sender

    def handle(self, event: Mapping[str, Any], config: ForwarderConfig) -> Dict[str, Any]:
        try:
            logger.info(f"Received event: {json.dumps(event, default=str)}")

            payload = parse_github_event_body(event)
            issue_url = extract_issue_url(payload)
            logger.info(f"Issue URL: {issue_url}")

            message = format_issue_created_message(issue_url)

            slack_url = config.resolve_slack_url()
            if not slack_url:
                raise MissingConfigurationError(SLACK_URL_ENV)
            logger.info(f"Slack Webhook URL: {slack_url}")

            response = self.sender.send(slack_url, message)
            logger.info(f"Slack Response: {response.status_code} {response.body}")
            # Slack rejecting the message does not change our own status code.
            if not 200 <= response.status_code < 300:
                logger.warning(f"Slack returned non-success status {response.status_code}")

            return _response(200, SUCCESS_BODY)
        except Exception as e:
            logger.error(f"Error: {e!r}", exc_info=True)
            return _response(500, f"Server Error: {e}")


# Shared across invocations in the same execution environment.
forwarder = WebhookForwarder(SlackWebhookSender.from_environ())


def lambda_handler(event, context):
    return forwarder.handle(event, ForwarderConfig.from_environ())
