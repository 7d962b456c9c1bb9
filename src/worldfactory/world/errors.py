"""Errors raised by world collaborators.

The factory never catches these: a collaborator failure aborts the whole
deploy call, and the next call retries from the last committed cursor.
"""

from __future__ import annotations


class WorldError(Exception):
    """Base class for world collaborator failures."""

    code = "WORLD_ERROR"


class ClassNotDeclaredError(WorldError):
    """Raised when a class reference does not resolve to declared code of the expected kind."""

    code = "CLASS_NOT_DECLARED"


class WorldAlreadyDeployedError(WorldError):
    """Raised when provisioning would collide with an existing world address."""

    code = "WORLD_ALREADY_DEPLOYED"


class NamespaceNotRegisteredError(WorldError):
    code = "NAMESPACE_NOT_REGISTERED"


class ResourceAlreadyRegisteredError(WorldError):
    code = "RESOURCE_ALREADY_REGISTERED"


class ResourceNotFoundError(WorldError):
    code = "RESOURCE_NOT_FOUND"


class ContractAlreadyInitializedError(WorldError):
    code = "CONTRACT_ALREADY_INITIALIZED"
