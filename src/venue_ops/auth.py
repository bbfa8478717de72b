"""Credential check behind ``POST /login``.

The result only flips a session flag that hides UI; it does not protect
any endpoint.
"""

import hmac
from abc import ABC, abstractmethod


class CredentialVerifier(ABC):
    @abstractmethod
    def verify(self, username: str, password: str) -> bool:
        """Return True when the pair is accepted."""


class StaticCredentialVerifier(CredentialVerifier):
    """Accepts exactly one configured username and password."""

    def __init__(self, username: str, password: str) -> None:
        self._username = username
        self._password = password

    def verify(self, username: str, password: str) -> bool:
        user_ok = hmac.compare_digest(username.encode(), self._username.encode())
        pass_ok = hmac.compare_digest(password.encode(), self._password.encode())
        return user_ok and pass_ok
