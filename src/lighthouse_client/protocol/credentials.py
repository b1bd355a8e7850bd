"""
Credentials
===========

Authentication identity used for the connection handshake.

Environment Variables:
    LIGHTHOUSE_USERNAME -> identifier
    LIGHTHOUSE_TOKEN    -> token
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from lighthouse_client.errors import ConfigError


USERNAME_ENV = "LIGHTHOUSE_USERNAME"
TOKEN_ENV = "LIGHTHOUSE_TOKEN"


@dataclass(frozen=True, slots=True)
class Credentials:
    """
    Identifier plus secret token.

    The token is left out of repr() so credentials can be logged safely.

    Attributes:
        identifier: Username on the Lighthouse server
        token: API token for that user
    """

    identifier: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("identifier must not be empty")
        if not self.token:
            raise ValueError("token must not be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        """
        Read credentials from the environment.

        Raises:
            ConfigError: If either variable is missing or empty
        """
        environ = os.environ if environ is None else environ
        identifier = environ.get(USERNAME_ENV, "")
        token = environ.get(TOKEN_ENV, "")
        missing = [
            name for name, value in ((USERNAME_ENV, identifier), (TOKEN_ENV, token))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing environment variables: {', '.join(missing)}")
        return cls(identifier, token)
