# taskbridge/linear/exceptions.py


class LinearError(Exception):
    """Base exception for Linear transport errors."""

    pass


class LinearAPIError(LinearError):
    """Exception raised for errors in the Linear API."""

    def __init__(self, message, errors=None, status_code=None):
        self.message = message
        self.errors = errors or []
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def is_not_found(self):
        """Linear reports missing entities as GraphQL errors, not HTTP 404s."""
        for error in self.errors:
            if isinstance(error, dict):
                text = str(error.get("message", ""))
            else:
                text = str(error)
            if "not found" in text.lower():
                return True
        return "entity not found" in self.message.lower()

    @property
    def extension_codes(self):
        """
        Normalised `extensions.code`/`extensions.type` values of the errors.

        Linear reports authentication, permission and rate-limit failures
        this way, often without a meaningful HTTP status.
        """
        codes = []
        for error in self.errors:
            if not isinstance(error, dict):
                continue
            extensions = error.get("extensions") or {}
            for key in ("code", "type"):
                value = extensions.get(key)
                if isinstance(value, str) and value:
                    codes.append(value.strip().upper().replace(" ", "_"))
        return codes


class StateNotFoundError(LinearError):
    """Exception raised when a team has no workflow state of a given type."""

    def __init__(self, team_id, state_type):
        self.team_id = team_id
        self.state_type = state_type
        super().__init__(
            f"team {team_id} has no workflow state of type '{state_type}'"
        )


class LinearConnectionError(LinearAPIError):
    """Exception raised when the Linear API cannot be reached."""

    pass
