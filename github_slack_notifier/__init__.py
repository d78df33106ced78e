"""Forward GitHub issue webhooks to a Slack incoming webhook."""
