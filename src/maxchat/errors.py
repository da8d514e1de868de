"""Exceptions raised inside the request pipeline."""

from typing import Any


class MaxChatError(Exception):
    """Base class for maxchat errors."""


class InvalidRequestError(MaxChatError):
    """The incoming request is missing required fields."""


class UpstreamError(MaxChatError):
    """The generation endpoint answered with a non-success status.

    Attributes:
        status_code: HTTP status returned by the endpoint.
        payload: Decoded error body, or a fixed message when it was not JSON.
    """

    def __init__(self, status_code: int, payload: Any) -> None:
        super().__init__(f"Upstream returned HTTP {status_code}")
        self.status_code = status_code
        self.payload = payload
