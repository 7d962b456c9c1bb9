"""Factory services: config store, cursor, phase engine and completion.

Architecture Note:
    factory/ is the stateful service layer. It owns the FactoryConfig and
    FactoryDeploymentCursor records and is the only writer of both.
"""

from worldfactory.factory.completion import CompletionRecorder
from worldfactory.factory.config_store import ConfigStore
from worldfactory.factory.cursor import (
    Budget,
    Phase,
    current_phase,
    load_or_create,
    overrun_phases,
)
from worldfactory.factory.driver import deploy_until_complete
from worldfactory.factory.engine import DeployOutcome, PhaseEngine
from worldfactory.factory.factory import WorldFactory

__all__ = [
    "WorldFactory",
    "ConfigStore",
    "PhaseEngine",
    "DeployOutcome",
    "CompletionRecorder",
    "Phase",
    "Budget",
    "current_phase",
    "load_or_create",
    "overrun_phases",
    "deploy_until_complete",
]
