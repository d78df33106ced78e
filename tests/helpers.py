import json

from slack_sdk.webhook import WebhookResponse

ISSUE_URL = "https://github.com/org/repo/issues/42"
SLACK_URL = "https://hooks.slack.test/abc"


def make_event(body) -> dict:
    """Build an API Gateway proxy event around a body (dict bodies are JSON-encoded)."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    return {
        "resource": "/webhook",
        "httpMethod": "POST",
        "headers": {"X-GitHub-Event": "issues", "Content-Type": "application/json"},
        "isBase64Encoded": False,
        "body": body,
    }


def make_response(status_code: int = 200, body: str = "ok") -> WebhookResponse:
    return WebhookResponse(url=SLACK_URL, status_code=status_code, body=body, headers={})
