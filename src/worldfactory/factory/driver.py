"""Caller-side loop issuing deploy calls until a deployment completes.

The factory never retries. This helper only repeats calls that returned
normally; any raised error propagates to the caller unchanged.
"""

from __future__ import annotations

import logging

from worldfactory.core.identity import Address
from worldfactory.factory.engine import DeployOutcome
from worldfactory.factory.factory import WorldFactory

logger = logging.getLogger(__name__)


def deploy_until_complete(
    factory: WorldFactory,
    name: str,
    version: int,
    max_calls: int = 1000,
    caller: Address | None = None,
) -> list[DeployOutcome]:
    """Call deploy until the deployment completes.

    Args:
        factory: Factory to call.
        name: World name.
        version: Config version.
        max_calls: Upper bound on the number of deploy calls.
        caller: Address issuing the calls.

    Returns:
        Outcomes of every call made, the last one completed.

    Raises:
        RuntimeError: If the deployment has not completed after max_calls calls.
    """
    if max_calls < 1:
        raise ValueError("max_calls must be >= 1")
    outcomes: list[DeployOutcome] = []
    for _ in range(max_calls):
        outcome = factory.deploy(name, version, caller=caller)
        outcomes.append(outcome)
        if outcome.completed:
            logger.info("Deployment %r completed in %d call(s)", name, len(outcomes))
            return outcomes
    raise RuntimeError(
        f"Deployment {name!r} from config {version} not completed after {max_calls} calls"
    )
