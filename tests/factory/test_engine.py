"""Tests for the phase engine through the WorldFactory facade.

Why these tests exist:
- Every deploy call must stop exactly at its budget and resume at the cursor
- A completed deployment is terminal
- A failing call must leave the last committed cursor untouched
"""

import logging

import pytest
from builders import (
    ADMIN,
    NAMESPACE,
    contract_selector,
    make_config,
    make_factory,
    model_class,
    model_selector,
)

from worldfactory import (
    Address,
    ConfigNotFoundError,
    DeploymentAlreadyCompletedError,
    FactoryDeploymentCursor,
    InvalidBudgetError,
    Phase,
    WorldContract,
    WorldContractConflictError,
    WorldFactory,
    WorldNameTakenError,
    namespace_selector,
)
from worldfactory.world import ClassKind, ClassNotDeclaredError, InitRecord


def _cursor(
    factory: WorldFactory, name: str = "arena", version: int = 1
) -> FactoryDeploymentCursor:
    cursor = factory.cursor(version, name)
    assert cursor is not None
    return cursor


def test_three_call_scenario(factory: WorldFactory) -> None:
    """2 contracts, 1 model, 0 events, max_actions 3: done on the third call."""
    factory.set_config(make_config(contracts=2, models=1, events=0, max_actions=3), ADMIN)

    first = factory.deploy("arena", 1)
    cursor = _cursor(factory)
    assert first.provisioned
    assert first.actions == 3
    assert not first.completed
    assert first.resume_phase is Phase.PERMISSIONS
    assert (cursor.contract_cursor, cursor.model_cursor, cursor.event_cursor) == (2, 1, 0)
    assert (cursor.permission_cursor, cursor.init_cursor) == (0, 0)
    assert cursor.total_actions == 3
    assert cursor.world_address == first.world_address

    second = factory.deploy("arena", 1)
    cursor = _cursor(factory)
    assert not second.provisioned
    assert second.actions == 3
    assert (cursor.permission_cursor, cursor.init_cursor) == (2, 1)
    assert cursor.total_actions == 6
    assert not cursor.completed
    assert factory.deployed("arena") is None

    third = factory.deploy("arena", 1)
    cursor = _cursor(factory)
    assert third.completed
    assert third.actions == 1
    assert cursor.init_cursor == 2
    assert cursor.total_actions == 7
    assert cursor.completed

    deployed = factory.deployed("arena")
    assert deployed is not None
    assert deployed.address == first.world_address


def test_fourth_call_fails_without_writes(factory: WorldFactory) -> None:
    factory.set_config(make_config(max_actions=3), ADMIN)
    for _ in range(3):
        factory.deploy("arena", 1)
    writes = factory.storage.write_count
    cursor_before = _cursor(factory)

    with pytest.raises(DeploymentAlreadyCompletedError) as exc_info:
        factory.deploy("arena", 1)

    assert exc_info.value.code == "DEPLOYMENT_ALREADY_COMPLETED"
    assert factory.storage.write_count == writes
    assert _cursor(factory) == cursor_before


def test_provisioning_is_not_budgeted(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=1, models=0, max_actions=1), ADMIN)

    outcome = factory.deploy("arena", 1)

    assert outcome.actions == 1
    assert _cursor(factory).contract_cursor == 1


def test_empty_config_completes_in_one_call(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=0, models=0, events=0, max_actions=1), ADMIN)

    outcome = factory.deploy("arena", 1)

    assert outcome.completed
    assert outcome.actions == 0
    world = factory.world(1, "arena")
    assert [ns.namespace for ns in world.namespaces()] == [NAMESPACE]


def test_budget_exhausted_on_last_action_completes_next_call(factory: WorldFactory) -> None:
    """Suspension is checked after each action, so completion waits for the next call."""
    factory.set_config(make_config(contracts=1, models=0, max_actions=3), ADMIN)

    first = factory.deploy("arena", 1)
    assert first.actions == 3
    assert not first.completed
    assert first.resume_phase is None

    second = factory.deploy("arena", 1)
    assert second.completed
    assert second.actions == 0
    assert second.total_actions == 3


def test_phases_fall_through_within_one_call(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=2, models=2, events=2, max_actions=100), ADMIN)

    outcome = factory.deploy("arena", 1)

    assert outcome.completed
    assert outcome.actions == make_config(contracts=2, models=2, events=2).total_actions_required()


def test_world_contract_records(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=2, max_actions=2), ADMIN)
    factory.deploy("arena", 1)

    world = factory.world(1, "arena")
    registered = {r.selector: r.address for r in world.resources()}
    for i in range(2):
        address = factory.world_contract("arena", contract_selector(i))
        assert address is not None
        assert registered[contract_selector(i)] == address


def test_permission_sync(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=2, models=1, writer_all=True, max_actions=50), ADMIN)
    factory.deploy("arena", 1)

    world = factory.world(1, "arena")
    for i in range(2):
        address = factory.world_contract("arena", contract_selector(i))
        assert world.is_writer(namespace_selector(NAMESPACE), address)
        assert world.is_writer(model_selector(0), address)
        assert world.is_owner(contract_selector(i), address)


def test_permission_cursor_counts_entries_not_grants(factory: WorldFactory) -> None:
    """One contract entry granting three permissions is a single action."""
    factory.set_config(make_config(contracts=1, models=1, writer_all=True, max_actions=2), ADMIN)

    factory.deploy("arena", 1)
    second = factory.deploy("arena", 1)

    cursor = _cursor(factory)
    assert second.actions == 2
    assert cursor.permission_cursor == 1
    assert cursor.init_cursor == 1
    assert len([p for p in factory.world(1, "arena").permissions()]) == 4


def test_without_writer_all_no_namespace_grant(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=1, models=0, grants=False, max_actions=10), ADMIN)
    factory.deploy("arena", 1)

    world = factory.world(1, "arena")
    address = factory.world_contract("arena", contract_selector(0))
    assert not world.is_writer(namespace_selector(NAMESPACE), address)


def test_init_args_passed(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=2, max_actions=50), ADMIN)
    factory.deploy("arena", 1)

    inits = {r.selector: r.init_args for r in factory.storage.records(InitRecord)}
    assert inits == {contract_selector(0): [0, 1], contract_selector(1): [1, 2]}


def test_collaborator_failure_rolls_back_whole_call() -> None:
    factory = make_factory()
    config = make_config(contracts=2, models=1, grants=False, max_actions=10)
    config.models = [0x3FF]
    factory.set_config(config, ADMIN)
    writes = factory.storage.write_count

    with pytest.raises(ClassNotDeclaredError):
        factory.deploy("arena", 1)

    assert factory.cursor(1, "arena") is None
    assert factory.world_contract("arena", contract_selector(0)) is None
    assert factory.storage.write_count == writes


def test_retry_resumes_from_last_committed_cursor() -> None:
    factory = make_factory()
    config = make_config(contracts=2, models=1, grants=False, max_actions=2)
    config.models = [0x3FF]
    factory.set_config(config, ADMIN)

    factory.deploy("arena", 1)
    committed = _cursor(factory)
    assert committed.contract_cursor == 2

    with pytest.raises(ClassNotDeclaredError):
        factory.deploy("arena", 1)
    assert _cursor(factory) == committed

    factory.classes.declare(0x3FF, "Late", ClassKind.MODEL)
    outcome = factory.deploy("arena", 1)

    assert outcome.actions == 2
    cursor = _cursor(factory)
    assert cursor.model_cursor == 1
    assert cursor.total_actions == 4


def test_unknown_version(factory: WorldFactory) -> None:
    with pytest.raises(ConfigNotFoundError) as exc_info:
        factory.deploy("arena", 42)
    assert exc_info.value.code == "CONFIG_NOT_FOUND"


def test_zero_budget_rejected(factory: WorldFactory) -> None:
    factory.set_config(make_config(max_actions=0), ADMIN)

    with pytest.raises(InvalidBudgetError):
        factory.deploy("arena", 1)
    assert factory.cursor(1, "arena") is None


def test_owner_can_raise_budget_mid_deployment(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=2, models=1, max_actions=1), ADMIN)
    factory.deploy("arena", 1)

    factory.set_config(make_config(contracts=2, models=1, max_actions=100), ADMIN)
    outcome = factory.deploy("arena", 1)

    assert outcome.completed
    assert outcome.actions == 6


def test_same_name_from_second_version_rejected(factory: WorldFactory) -> None:
    factory.set_config(make_config(version=1, max_actions=100), ADMIN)
    factory.set_config(make_config(version=2, max_actions=100), ADMIN)
    factory.deploy("arena", 1)

    with pytest.raises(WorldNameTakenError):
        factory.deploy("arena", 2)
    assert factory.cursor(2, "arena") is None


def test_deploy_caller_does_not_need_ownership(factory: WorldFactory) -> None:
    factory.set_config(make_config(max_actions=100), ADMIN)

    outcome = factory.deploy("arena", 1, caller=Address(0x999))

    assert outcome.completed


def test_undeclared_contract_class_fails_at_registration(factory: WorldFactory) -> None:
    config = make_config(contracts=1, models=1, max_actions=100)
    config.contracts[0].class_hash = model_class(0)
    factory.set_config(config, ADMIN)

    with pytest.raises(ClassNotDeclaredError):
        factory.deploy("arena", 1)


def test_name_in_progress_under_other_version_rejected(factory: WorldFactory) -> None:
    """A half-deployed name cannot be taken over by a config with another world class."""
    factory.classes.declare(0x101, "world2", ClassKind.WORLD)
    factory.set_config(make_config(version=1, contracts=2, max_actions=2), ADMIN)
    other = make_config(version=2, contracts=2, max_actions=100)
    other.world_class_hash = 0x101
    factory.set_config(other, ADMIN)

    factory.deploy("arena", 1)
    recorded = factory.world_contract("arena", contract_selector(0))
    assert recorded is not None

    with pytest.raises(WorldNameTakenError) as exc_info:
        factory.deploy("arena", 2)

    assert exc_info.value.code == "WORLD_NAME_TAKEN"
    assert factory.cursor(2, "arena") is None
    assert factory.world_contract("arena", contract_selector(0)) == recorded

    assert factory.deploy("arena", 1).completed


def test_recorded_contract_address_is_never_overwritten(factory: WorldFactory) -> None:
    factory.set_config(make_config(contracts=1, max_actions=100), ADMIN)
    factory.storage.write(
        WorldContract(
            name="arena",
            contract_selector=contract_selector(0),
            contract_address=Address(0x123),
        )
    )

    with pytest.raises(WorldContractConflictError) as exc_info:
        factory.deploy("arena", 1)

    assert exc_info.value.code == "WORLD_CONTRACT_CONFLICT"
    assert exc_info.value.recorded == Address(0x123)
    assert factory.world_contract("arena", contract_selector(0)) == Address(0x123)
    assert factory.cursor(1, "arena") is None


def test_shrunk_config_warns_and_completes(
    factory: WorldFactory, caplog: pytest.LogCaptureFixture
) -> None:
    """Items already deployed past the new length stay deployed; the phase is skipped."""
    factory.set_config(make_config(contracts=2, models=3, max_actions=4), ADMIN)
    factory.deploy("arena", 1)
    assert _cursor(factory).model_cursor == 2

    factory.set_config(make_config(contracts=2, models=1, max_actions=100), ADMIN)
    with caplog.at_level(logging.WARNING, logger="worldfactory"):
        outcome = factory.deploy("arena", 1)

    assert outcome.completed
    assert outcome.actions == 4
    assert "models cursor 2 is past the config length 1" in caplog.text
    assert _cursor(factory).model_cursor == 2
