import base64
import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import boto3
from slack_sdk.webhook import WebhookClient, WebhookResponse

from .exceptions import EmptyBodyError, MissingIssueUrlError

logger = logging.getLogger()

# --- Environment Variables ---
SLACK_URL_ENV = 'SLACK_URL'
SLACK_URL_PARAM_ENV = 'SLACK_URL_PARAM'  # SSM parameter holding the webhook URL
SLACK_TIMEOUT_ENV = 'SLACK_TIMEOUT'
DEFAULT_TIMEOUT = 30

_ssm_client = None


@dataclass(frozen=True)
class SlackMessage:
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text}


def format_issue_created_message(issue_url: str) -> SlackMessage:
    return SlackMessage(text=f"Issue Created: {issue_url}")


class SlackWebhookSender:
    """
    Posts messages to Slack incoming webhooks.

    One instance is meant to live for the whole process. A WebhookClient is
    created the first time a URL is seen and reused for every later send to
    that URL, so concurrent invocations share clients instead of rebuilding
    them per request.

    Retries are disabled: each send makes exactly one HTTP attempt.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout
        self._clients: Dict[str, WebhookClient] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] = os.environ) -> "SlackWebhookSender":
        raw_timeout = environ.get(SLACK_TIMEOUT_ENV)
        if not raw_timeout:
            return cls()
        try:
            return cls(timeout=int(raw_timeout))
        except ValueError:
            logger.warning(f"Ignoring invalid {SLACK_TIMEOUT_ENV}={raw_timeout!r}, using {DEFAULT_TIMEOUT}s")
            return cls()

    def client_for(self, url: str) -> WebhookClient:
        with self._lock:
            client = self._clients.get(url)
            if client is None:
                client = WebhookClient(url=url, timeout=self.timeout, retry_handlers=[])
                self._clients[url] = client
            return client

    def send(self, url: str, message: SlackMessage) -> WebhookResponse:
        """
        Sends one message. Non-2xx statuses from Slack come back as a
        WebhookResponse; transport failures (DNS, refused connection,
        timeout) raise.
        """
        return self.client_for(url).send_dict(message.to_dict())


def _get_ssm_client():
    global _ssm_client
    if _ssm_client is None:
        _ssm_client = boto3.client('ssm')
    return _ssm_client


def resolve_slack_url(url: Optional[str], param: Optional[str] = None) -> Optional[str]:
    """
    Returns the Slack webhook URL for this invocation.

    A direct URL (SLACK_URL) wins when set. Otherwise param, if present, names
    an SSM parameter holding the URL. Returns None when neither is configured.
    """
    if url:
        return url
    if not param:
        return None
    logger.info(f"{SLACK_URL_ENV} not set, reading webhook URL from SSM parameter {param}")
    response = _get_ssm_client().get_parameter(Name=param, WithDecryption=True)
    return response["Parameter"]["Value"] or None


def get_event_body(event: Mapping[str, Any]) -> str:
    """Returns the raw request body, decoding API Gateway base64 bodies."""
    body = event.get('body')
    if not body:
        raise EmptyBodyError()
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')
        if not body:
            raise EmptyBodyError()
    return body


def parse_github_event_body(event: Mapping[str, Any]) -> Any:
    """
    Parses the JSON body from the Lambda event triggered by API Gateway.
    Malformed JSON raises json.JSONDecodeError. A whitespace-only body
    parses to nothing and is reported as a missing issue URL.
    """
    body = get_event_body(event)
    logger.info(f"Request Body: {body}")
    if not body.strip():
        raise MissingIssueUrlError()
    return json.loads(body)


def extract_issue_url(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise MissingIssueUrlError()
    issue = payload.get('issue')
    if not isinstance(issue, dict):
        raise MissingIssueUrlError()
    html_url = issue.get('html_url')
    if not isinstance(html_url, str):
        raise MissingIssueUrlError()
    return html_url
