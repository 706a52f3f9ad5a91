# rangebet/core/roles.py

import logging
from abc import ABC, abstractmethod

from .errors import Unauthorized, InvalidParameters

logger = logging.getLogger(__name__)

class AccessControl(ABC):
    """
    Abstract capability check gating administrative operations
    (market creation, activation, closing and collateral withdrawal).
    """
    @abstractmethod
    def is_authorized(self, caller: str) -> bool:
        """Return True if caller may perform administrative operations."""
        pass

    def require(self, caller: str) -> None:
        """Raise Unauthorized unless caller is authorized."""
        if not self.is_authorized(caller):
            logger.warning("Rejected administrative call from %s", caller)
            raise Unauthorized(caller)

class OwnerAccessControl(AccessControl):
    """
    Single privileged owner, like an Ownable contract.
    """
    def __init__(self, owner: str):
        if not owner:
            raise InvalidParameters("Owner cannot be empty")
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    def is_authorized(self, caller: str) -> bool:
        return caller == self._owner

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Hand the owner role to new_owner. Only the current owner may call."""
        self.require(caller)
        if not new_owner:
            raise InvalidParameters("New owner cannot be empty")
        logger.info("Ownership transferred from %s to %s", self._owner, new_owner)
        self._owner = new_owner
