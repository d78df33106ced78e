class ForwarderError(Exception):
    """Base class for failures that abort a forwarding invocation."""


class EmptyBodyError(ForwarderError):
    def __init__(self):
        super().__init__("Request body is empty.")


class MissingIssueUrlError(ForwarderError):
    def __init__(self):
        super().__init__("Issue URL not found in the request body.")


class MissingConfigurationError(ForwarderError):
    def __init__(self, variable: str = "SLACK_URL"):
        self.variable = variable
        super().__init__(f"{variable} environment variable is not set.")
