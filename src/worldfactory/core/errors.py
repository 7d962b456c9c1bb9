"""Factory error taxonomy.

Every error carries a stable ``code`` so callers and indexers can match on it
without depending on message text.
"""

from __future__ import annotations


class FactoryError(Exception):
    """Base class for errors raised by the factory itself."""

    code = "FACTORY_ERROR"


class NotConfigOwnerError(FactoryError):
    """Raised when a caller other than the recorded owner overwrites a config version."""

    code = "NOT_CONFIG_OWNER"

    def __init__(self, version: int, caller: object, owner: object):
        super().__init__(f"{self.code}: config version {version} is owned by {owner}, not {caller}")
        self.version = version
        self.caller = caller
        self.owner = owner


class DeploymentAlreadyCompletedError(FactoryError):
    """Raised when deploy is called for a (version, name) whose cursor is completed."""

    code = "DEPLOYMENT_ALREADY_COMPLETED"

    def __init__(self, version: int, name: str):
        super().__init__(f"{self.code}: world {name!r} already deployed from config {version}")
        self.version = version
        self.name = name


class ConfigNotFoundError(FactoryError):
    """Raised when deploy references a config version that was never set."""

    code = "CONFIG_NOT_FOUND"

    def __init__(self, version: int):
        super().__init__(f"{self.code}: no factory config for version {version}")
        self.version = version


class InvalidBudgetError(FactoryError):
    """Raised when a config's per-call action budget cannot make progress."""

    code = "INVALID_MAX_ACTIONS"

    def __init__(self, version: int, max_actions: int):
        super().__init__(
            f"{self.code}: config version {version} has max_actions={max_actions}, must be >= 1"
        )
        self.version = version
        self.max_actions = max_actions


class WorldNameTakenError(FactoryError):
    """Raised when a world name is already deployed or being deployed by another config."""

    code = "WORLD_NAME_TAKEN"

    def __init__(self, name: str, address: object):
        super().__init__(f"{self.code}: world {name!r} already taken by {address}")
        self.name = name
        self.address = address


class ContractNotRegisteredError(FactoryError):
    """Raised when a later phase needs a contract address that was never recorded."""

    code = "CONTRACT_NOT_REGISTERED"

    def __init__(self, name: str, selector: int):
        super().__init__(f"{self.code}: no contract {selector:#x} recorded for world {name!r}")
        self.name = name
        self.selector = selector


class WorldContractConflictError(FactoryError):
    """Raised when a contract address would overwrite a different recorded one."""

    code = "WORLD_CONTRACT_CONFLICT"

    def __init__(self, name: str, selector: int, recorded: object, new: object):
        super().__init__(
            f"{self.code}: contract {selector:#x} of world {name!r} is recorded at {recorded}, "
            f"refusing to overwrite with {new}"
        )
        self.name = name
        self.selector = selector
        self.recorded = recorded
        self.new = new
