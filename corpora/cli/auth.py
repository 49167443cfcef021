"""Obtaining a bearer token from the server with client credentials."""

from __future__ import annotations

import http
from dataclasses import dataclass, field

import requests


class AuthenticationError(Exception):
    """The server did not hand out an access token."""


def _status_text(status: int) -> str:
    try:
        return f"{status} {http.HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


@dataclass
class ClientSecretAuth:
    """OAuth client-credentials authentication."""

    server_base_url: str
    client_id: str
    client_secret: str = field(repr=False)

    def authenticate(self) -> str:
        """Request a token and return it."""
        token_url = f"{self.server_base_url}/o/token/"
        try:
            response = requests.post(
                token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
        except requests.RequestException as exc:
            raise AuthenticationError(f"HTTP request failed: {exc}") from exc

        if not 200 <= response.status_code <= 299:
            try:
                error_text = response.text
            except (requests.RequestException, UnicodeDecodeError):
                error_text = "Unable to retrieve error details"
            raise AuthenticationError(
                "Authentication failed with status "
                f"{_status_text(response.status_code)}: {error_text}"
            )

        try:
            token_response = response.json()
        except ValueError as exc:
            raise AuthenticationError(f"Failed to parse JSON: {exc}") from exc

        token = (
            token_response.get("access_token")
            if isinstance(token_response, dict)
            else None
        )
        if not isinstance(token, str):
            raise AuthenticationError("Access token not found in response")
        return token