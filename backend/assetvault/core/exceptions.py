"""
Exception types raised by the vault services
"""

from typing import List


class VaultError(Exception):
    """Base class for all vault errors"""
    pass


class ScopeError(VaultError):
    """Caller has no resolvable client scope"""

    def __init__(self, message: str = "Client scope is required"):
        super().__init__(message)


class NotFoundError(VaultError):
    """
    Entity does not exist or lives outside the caller's tenant/client.

    Both cases share one message so a caller cannot probe other tenants.
    """

    def __init__(self, entity: str = "Entity"):
        self.entity = entity
        super().__init__(f"{entity} not found")


class ValidationError(VaultError):
    """Request rejected by the store"""
    pass


class CryptoError(VaultError):
    """Bad encryption key or a payload that failed authentication"""
    pass


class DeliveryError(VaultError):
    """Outbound mail could not be delivered"""
    pass


class CascadeError(VaultError):
    """One branch of a cascade delete failed"""

    def __init__(self, branch: str, cause: Exception):
        self.branch = branch
        self.cause = cause
        super().__init__(f"Cascade branch '{branch}' failed: {cause}")


class CascadeResult:
    """Outcome of a best-effort cascade delete"""

    def __init__(self) -> None:
        self.deleted = False
        self.counts: dict[str, int] = {}
        self.failures: List[CascadeError] = []

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "deleted": self.deleted,
            "counts": dict(self.counts),
            "failures": [
                {"branch": failure.branch, "error": str(failure.cause)}
                for failure in self.failures
            ],
        }
