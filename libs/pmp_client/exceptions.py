"""
PMP API Client Exception Hierarchy.

Exception hierarchy:
    PMPClientError (base)
    ├── ConfigurationError - Config file missing, unreadable or invalid
    ├── EndpointCallError - Transport, HTTP status or body failure
    └── ResponseParseError - Endpoint body did not match its expected shape

These exceptions are raised and handled inside the client. The public
retrieve_password() operation never propagates them: every failure degrades
to an empty string for the caller.

Exceptions carry context (key, endpoint) but NEVER password values.
"""


class PMPClientError(Exception):
    """
    Base exception for all PMP client errors.

    Attributes:
        message: Human-readable error message (MUST NOT include password values)
        key: Logical key or account name involved, if any
        endpoint: Endpoint path involved (e.g., "/resources"), if any
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.endpoint = endpoint

    def __str__(self) -> str:
        """
        Format error message with context (key + endpoint).

        Example:
            >>> str(PMPClientError("Timeout", endpoint="/resources"))
            'Timeout (endpoint: /resources)'
        """
        context_parts = []
        if self.key:
            context_parts.append(f"key: {self.key}")
        if self.endpoint:
            context_parts.append(f"endpoint: {self.endpoint}")

        if context_parts:
            return f"{self.message} ({', '.join(context_parts)})"
        return self.message


class ConfigurationError(PMPClientError):
    """
    Raised when the PMPAPIClient config file cannot be used.

    Common causes:
    - APPSETTINGS_DIRECTORY not set in the environment
    - PMPAPIClient_config.json missing from that directory
    - Required field (AuthToken, Host, Prefix) missing, null or empty

    Attributes:
        errors: Field-level error messages, one per failed field
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class EndpointCallError(PMPClientError):
    """
    Raised when a vault endpoint call fails at the transport or body level.

    Includes connection errors, timeouts, non-2xx responses and bodies that
    are not a JSON object.
    """

    def __init__(self, endpoint: str, reason: str) -> None:
        if not isinstance(reason, str) or not reason:
            raise TypeError("reason must be a non-empty string")
        super().__init__(message=f"Endpoint call failed: {reason}", endpoint=endpoint)
        self.reason = reason


class ResponseParseError(PMPClientError):
    """
    Raised when an endpoint response does not match its typed shape.

    Example:
        >>> parse_response(ResourceListResponse, {}, "/resources")
        ResponseParseError: Unexpected response shape: operation: Field required
                            (endpoint: /resources)
    """

    def __init__(self, endpoint: str, errors: list[str]) -> None:
        detail = "; ".join(errors) if errors else "unknown error"
        super().__init__(message=f"Unexpected response shape: {detail}", endpoint=endpoint)
        self.errors = list(errors)
