"""Permission-tagged API credentials.

The tag mirrors the permission class the key was created with on the
exchange. It is informational: the exchange enforces permissions, this module
only records them so callers can decide not to build privileged requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from coinex.auth.credential import Capability, Credential


class Permission(str, Enum):
    READ_ONLY = "read_only"
    WITHDRAW = "withdraw"
    TRADE = "trade"
    FULL = "full"


PERMISSION_CAPABILITIES: dict[Permission, frozenset[Capability]] = {
    Permission.READ_ONLY: frozenset(),
    Permission.WITHDRAW: frozenset({Capability.WITHDRAW}),
    Permission.TRADE: frozenset({Capability.TRADE}),
    Permission.FULL: frozenset({Capability.TRADE, Capability.WITHDRAW}),
}


@dataclass(frozen=True)
class AuthScope:
    permission: Permission
    credential: Credential

    @classmethod
    def read_only(cls, credential: Credential) -> AuthScope:
        return cls(Permission.READ_ONLY, credential)

    @classmethod
    def withdraw(cls, credential: Credential) -> AuthScope:
        return cls(Permission.WITHDRAW, credential)

    @classmethod
    def trade(cls, credential: Credential) -> AuthScope:
        return cls(Permission.TRADE, credential)

    @classmethod
    def full(cls, credential: Credential) -> AuthScope:
        return cls(Permission.FULL, credential)

    def resolve(self) -> Credential:
        """Return the wrapped credential, whatever the permission tag."""
        return self.credential

    @property
    def capabilities(self) -> frozenset[Capability]:
        return PERMISSION_CAPABILITIES.get(Permission(self.permission), frozenset())

    def allows(self, capability: Capability) -> bool:
        return capability in self.capabilities
