class ExaError(Exception):
    """A base exception for the Exa client."""

    msg: str

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(msg)

    def __str__(self) -> str:
        return self.msg


class ExaConfigurationError(ExaError):
    """An exception for when the client cannot be configured."""

    def __init__(self, env_var: str):
        super().__init__(f"API key must be provided as an argument or as an environment variable ({env_var})")


class ExaInputError(ExaError):
    """An exception for when a caller provides unusable arguments."""


class ExaRequestError(ExaError):
    """An exception for when the Exa API responds with a non-success status."""

    status: int
    message: str | None

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        self.message = message
        super().__init__(f"Request failed with status {status}. {message or 'No error message provided'}")
