"""Error hierarchy for the CoinGecko MCP server."""

from __future__ import annotations


class CoinGeckoMCPError(Exception):
    """Base error for the CoinGecko MCP server."""


class ConfigurationError(CoinGeckoMCPError):
    """Raised when required configuration (the API key) is missing or invalid."""


class InvalidArgumentsError(CoinGeckoMCPError):
    """Raised when tool arguments fail validation.

    Each issue is a ``(field, message)`` pair, where ``field`` is the dotted
    path of the offending argument.
    """

    def __init__(self, issues: list[tuple[str, str]]) -> None:
        self.issues = issues
        details = ", ".join(f"{field}: {message}" for field, message in issues)
        super().__init__(f"Invalid arguments: {details}")


class UpstreamError(CoinGeckoMCPError):
    """Raised when a CoinGecko request fails or returns an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API request failed: {message}")


class UnknownOperationError(CoinGeckoMCPError):
    """Raised when a tool name has no registered handler."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")
