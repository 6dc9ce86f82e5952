import pytest

from budget_planner.engine import BudgetPlanner
from budget_planner.errors import PersistenceError, ValidationError
from budget_planner.storage import JsonFileStore, MemoryStore, PersistenceSynchronizer
from budget_planner.theme import StaticColorScheme


class FailingStore(MemoryStore):
    def set_many(self, values, deleted=()):
        raise PersistenceError(PersistenceError.UNAVAILABLE, 'quota exceeded')


def _planner(store=None, signal=None):
    return BudgetPlanner(store=store if store is not None else MemoryStore(), signal=signal, seed=False)


def test_scenario_from_empty_store():
    planner = _planner()
    planner.add_item('A', 7_800_000)
    planner.add_item('B', 5_000_000)
    planner.set_income(10_000_000)
    projection = planner.projection
    assert projection.total_target == 12_800_000
    assert projection.savings_per_unit == 2_000_000
    assert projection.time_to_target == 7


def test_projection_recomputed_after_each_change():
    planner = _planner()
    planner.set_income('10000000')
    planner.add_item('A', 4_000_000)
    assert planner.projection.time_to_target == 2
    planner.set_time_unit('week')
    assert planner.projection.time_to_target == 8
    planner.set_saving_percentage(40)
    assert planner.projection.time_to_target == 4
    item = planner.add_item('B', 4_000_000, 'investment')
    assert planner.projection.category_totals['investment'] == 4_000_000
    planner.remove_item(item.id)
    assert planner.projection.category_totals['investment'] == 0
    planner.set_income('')
    assert planner.projection.time_to_target == 0


def test_every_mutation_is_persisted_and_restored(tmp_path):
    path = tmp_path / 'store.json'
    planner = _planner(JsonFileStore(path))
    planner.add_item('Laptop', 7_800_000, 'wants')
    kept = planner.add_item('Fund', 1_000_000, 'investment')
    dropped = planner.add_item('Trip', 5_000_000)
    planner.remove_item(dropped.id)
    planner.set_income(10_000_000)
    planner.set_saving_percentage(30)
    planner.set_time_unit('year')
    planner.set_wallet(2_500_000)
    planner.close()

    restored = _planner(JsonFileStore(path))
    assert [(item.name, item.price, item.category) for item in restored.items()] == [
        ('Laptop', 7_800_000, 'wants'),
        ('Fund', 1_000_000, 'investment'),
    ]
    assert restored.settings == planner.settings
    assert restored.items()[1].id == kept.id


def test_invalid_add_does_not_persist_or_mutate():
    store = MemoryStore()
    planner = _planner(store)
    with pytest.raises(ValidationError):
        planner.add_item('', 100)
    with pytest.raises(ValidationError):
        planner.add_item('Thing', -1)
    assert planner.items() == ()
    assert store.data == {}


@pytest.mark.parametrize(
    'setter, value',
    [
        ('set_income', 'abc'),
        ('set_income', -10),
        ('set_saving_percentage', 0),
        ('set_saving_percentage', 101),
        ('set_saving_percentage', 12.5),
        ('set_saving_percentage', 'many'),
        ('set_time_unit', 'decade'),
        ('set_wallet', 'lots'),
    ],
)
def test_invalid_settings_are_rejected(setter, value):
    planner = _planner()
    before = planner.settings
    with pytest.raises(ValidationError) as excinfo:
        getattr(planner, setter)(value)
    assert excinfo.value.reason == ValidationError.INVALID_SETTING
    assert planner.settings == before


def test_failed_save_keeps_in_memory_mutation():
    errors = []
    planner = _planner(FailingStore())
    planner.sync.subscribe_errors(errors.append)
    item = planner.add_item('Bike', 2_000_000)
    assert planner.items() == (item,)
    assert planner.projection.total_target == 2_000_000
    assert len(errors) == 1


def test_corrupt_store_starts_with_defaults(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text('{"items": [', encoding='utf-8')
    planner = _planner(JsonFileStore(path))
    assert planner.items() == ()
    assert planner.settings.saving_percentage == 20
    assert planner.settings.time_unit == 'month'
    assert planner.settings.wallet == 1_000_000
    assert planner.projection.time_to_target == 0


def test_theme_follows_os_until_toggled():
    store = MemoryStore()
    signal = StaticColorScheme(dark=False)
    planner = _planner(store, signal)
    assert planner.dark_mode is False

    signal.emit(True)
    assert planner.dark_mode is True

    state = planner.toggle_theme()
    assert state.dark is False
    assert planner.settings.theme_preference == 'light'
    assert store.get('theme') == '"light"'

    signal.emit(True)
    assert planner.dark_mode is False


def test_stored_theme_restored_on_startup():
    store = MemoryStore()
    planner = _planner(store, StaticColorScheme(dark=False))
    planner.choose_theme(True)
    planner.close()

    signal = StaticColorScheme(dark=False)
    restored = _planner(store, signal)
    assert restored.dark_mode is True
    assert signal.subscriber_count == 0


def test_close_releases_os_subscription():
    signal = StaticColorScheme()
    with _planner(signal=signal):
        assert signal.subscriber_count == 1
    assert signal.subscriber_count == 0


def test_planner_uses_given_synchronizer_store():
    store = MemoryStore()
    planner = _planner(store)
    assert isinstance(planner.sync, PersistenceSynchronizer)
    assert planner.sync.store is store


def test_raising_error_listener_does_not_break_add():
    planner = _planner(FailingStore())

    def broken_listener(error):
        raise ZeroDivisionError('listener bug')

    planner.sync.subscribe_errors(broken_listener)
    item = planner.add_item('Bike', 2_000_000)
    assert planner.items() == (item,)
    assert planner.sync.last_error.kind == PersistenceError.UNAVAILABLE


def test_unexpected_store_exception_does_not_break_mutations():
    class RawOSErrorStore(MemoryStore):
        def set_many(self, values, deleted=()):
            raise OSError('disk full')

    errors = []
    planner = _planner(RawOSErrorStore())
    planner.sync.subscribe_errors(errors.append)
    item = planner.add_item('Bike', 2_000_000)
    planner.set_income(5_000_000)
    assert planner.remove_item(item.id) is True
    assert planner.settings.income == 5_000_000
    assert [error.kind for error in errors] == [PersistenceError.UNAVAILABLE] * 3
