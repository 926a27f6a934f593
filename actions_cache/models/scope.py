"""
Access-control scopes carried by the runtime token.
"""

import json
from dataclasses import dataclass
from enum import IntFlag
from typing import Any

from actions_cache.exceptions import ConfigurationError


class Permission(IntFlag):
    """Permission bits granted on a scope."""

    READ = 1
    WRITE = 2

    def __str__(self) -> str:
        if self.value > (Permission.READ | Permission.WRITE).value:
            return str(self.value)
        names = []
        if self & Permission.READ:
            names.append("Read")
        if self & Permission.WRITE:
            names.append("Write")
        return "|".join(names)


@dataclass(frozen=True, slots=True)
class Scope:
    """
    A resource pattern and the permissions granted on it.

    Attributes:
        pattern: Resource path match expression (e.g. a git ref).
        permission: Granted permission bits.
    """

    pattern: str
    permission: Permission

    def allows(self, permission: Permission) -> bool:
        """Check that every bit of ``permission`` is granted."""
        return (self.permission & permission) == permission

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scope":
        """Build a scope from one access-control object, matching keys case-insensitively."""
        fields = {key.lower(): value for key, value in data.items()}
        pattern = fields.get("scope", "")
        permission = fields.get("permission", 0)
        if not isinstance(pattern, str) or not isinstance(permission, int):
            msg = "Invalid access control entry"
            raise ConfigurationError(msg, entry=data)
        return cls(pattern=pattern, permission=Permission(permission))


def parse_scopes(raw: str) -> tuple[Scope, ...]:
    """
    Parse the JSON-encoded access-control claim.

    Args:
        raw: JSON array of ``{"Scope": ..., "Permission": ...}`` objects.

    Returns:
        Scopes in claim order. An empty array yields an empty tuple.

    Raises:
        ConfigurationError: If the claim is not a JSON array of objects.
    """
    try:
        entries = json.loads(raw)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse token access controls: {e}"
        raise ConfigurationError(msg) from e

    if entries is None:
        return ()
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        msg = "Token access controls must be a list of objects"
        raise ConfigurationError(msg)
    return tuple(Scope.from_dict(entry) for entry in entries)
