"""Tests for phase ordering, cursor positions and the per-call budget."""

from builders import make_config

from worldfactory import FactoryDeploymentCursor, LocalStorage, Phase
from worldfactory.factory import Budget, current_phase, load_or_create, overrun_phases


def test_phase_order() -> None:
    assert [p.label for p in Phase] == ["contracts", "models", "events", "permissions", "init"]


def test_phase_lengths_follow_config() -> None:
    config = make_config(contracts=2, models=3, events=1)

    lengths = {p: p.length(config) for p in Phase}

    assert lengths == {
        Phase.CONTRACTS: 2,
        Phase.MODELS: 3,
        Phase.EVENTS: 1,
        Phase.PERMISSIONS: 2,
        Phase.INIT: 2,
    }


def test_remaining_starts_at_cursor() -> None:
    config = make_config(models=3)
    cursor = FactoryDeploymentCursor(version=1, name="w", model_cursor=1)

    assert [i for i, _ in Phase.MODELS.remaining(cursor, config)] == [1, 2]
    assert [m for _, m in Phase.MODELS.remaining(cursor, config)] == config.models[1:]


def test_advance_and_done() -> None:
    config = make_config(contracts=1)
    cursor = FactoryDeploymentCursor(version=1, name="w")

    assert not Phase.INIT.is_done(cursor, config)
    Phase.INIT.advance(cursor)

    assert cursor.init_cursor == 1
    assert Phase.INIT.is_done(cursor, config)


def test_current_phase_skips_empty_phases() -> None:
    config = make_config(contracts=1, models=0, events=0)
    cursor = FactoryDeploymentCursor(version=1, name="w", contract_cursor=1)

    assert current_phase(cursor, config) is Phase.PERMISSIONS

    cursor.permission_cursor = 1
    cursor.init_cursor = 1
    assert current_phase(cursor, config) is None


def test_load_or_create(storage: LocalStorage) -> None:
    fresh = load_or_create(storage, 1, "w")
    assert fresh == FactoryDeploymentCursor(version=1, name="w")
    assert storage.read(FactoryDeploymentCursor, 1, "w") is None

    fresh.model_cursor = 2
    storage.write(fresh)
    assert load_or_create(storage, 1, "w").model_cursor == 2


def test_budget_ceiling_counts_from_lifetime_total() -> None:
    cursor = FactoryDeploymentCursor(version=1, name="w", total_actions=5)
    budget = Budget.for_call(cursor, make_config(max_actions=2))

    assert budget.ceiling == 7
    assert budget.charge(cursor) is False
    assert budget.charge(cursor) is True
    assert cursor.total_actions == 7
    assert budget.spent == 2


def test_overrun_phases_after_config_shrinks() -> None:
    cursor = FactoryDeploymentCursor(version=1, name="w", contract_cursor=2, model_cursor=3)

    assert overrun_phases(cursor, make_config(contracts=2, models=3)) == []

    shrunk = make_config(contracts=1, models=1)
    assert overrun_phases(cursor, shrunk) == [Phase.CONTRACTS, Phase.MODELS]
    assert list(Phase.MODELS.remaining(cursor, shrunk)) == []
    assert current_phase(cursor, shrunk) is Phase.PERMISSIONS
