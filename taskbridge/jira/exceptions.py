# taskbridge/jira/exceptions.py


class JiraError(Exception):
    """Base exception for Jira transport errors."""

    pass


class JiraAPIError(JiraError):
    """Exception raised for failed Jira API requests."""

    def __init__(self, message, status_code=None, response=None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class TransitionNotFoundError(JiraError):
    """Exception raised when no workflow transition reaches a status."""

    def __init__(self, issue_key, status):
        self.issue_key = issue_key
        self.status = status
        super().__init__(f"no transition available to status: {status}")


class JiraConnectionError(JiraAPIError):
    """Exception raised when the Jira server cannot be reached."""

    pass
