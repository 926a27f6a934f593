"""
Authenticated session for the artifact cache.

The runtime token is a JWT signed by the hosting service. Its claims are
read without verifying the signature: the service verifies it on every
request and this client only needs the access-control claim.
"""

from dataclasses import dataclass, field

import jwt
import structlog

from actions_cache.constants import ACCEPT, API_PATH
from actions_cache.exceptions import ConfigurationError
from actions_cache.models.scope import Scope, parse_scopes

logger = structlog.get_logger(__name__)

ACCESS_CONTROL_CLAIM = "ac"


@dataclass(frozen=True, kw_only=True)
class Session:
    """
    Immutable session data shared by every request.

    Attributes:
        base_url: Service base URL (as given by the runner, trailing slash included).
        raw_token: Bearer credential, sent verbatim.
        scopes: Access-control scopes parsed from the token.
    """

    base_url: str
    raw_token: str = field(repr=False)
    scopes: tuple[Scope, ...] = ()

    @classmethod
    def from_token(cls, token: str, base_url: str) -> "Session":
        """
        Build a session from a runtime token.

        Args:
            token: Signed JWT carrying an ``ac`` claim.
            base_url: Service base URL.

        Returns:
            Session with parsed scopes. A token granting no scopes is valid.

        Raises:
            ConfigurationError: If the token cannot be decoded or its
                access-control claim is missing or malformed.
        """
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as e:
            msg = f"Invalid runtime token: {e}"
            raise ConfigurationError(msg) from e

        if ACCESS_CONTROL_CLAIM not in claims:
            msg = "Invalid token without access controls"
            raise ConfigurationError(msg)
        access_controls = claims[ACCESS_CONTROL_CLAIM]
        if not isinstance(access_controls, str):
            msg = "Invalid token without access controls type"
            raise ConfigurationError(msg, claim_type=type(access_controls).__name__)

        scopes = parse_scopes(access_controls)
        logger.debug("Parsed token", scopes=[(s.pattern, str(s.permission)) for s in scopes])
        return cls(base_url=base_url, raw_token=token, scopes=scopes)

    @property
    def api_url(self) -> str:
        """Root of the artifact cache API."""
        return self.base_url + API_PATH

    @property
    def headers(self) -> dict[str, str]:
        """Headers attached to every authenticated request."""
        return {
            "Authorization": f"Bearer {self.raw_token}",
            "Accept": ACCEPT,
        }
