import pytest

from budget_planner.errors import ValidationError
from budget_planner.ledger import Ledger
from budget_planner.models import BudgetItem


def _seeded():
    ledger = Ledger()
    ledger.add('Laptop', 7_800_000, 'wants')
    ledger.add('Rent', 2_000_000, 'necessities')
    return ledger


def test_add_appends_in_order_with_unique_ids():
    ledger = Ledger()
    added = [ledger.add(f'Item {n}', n + 1) for n in range(100)]
    ids = [item.id for item in ledger.items()]
    assert len(set(ids)) == 100
    assert [item.name for item in ledger.items()] == [item.name for item in added]


def test_add_defaults_category_to_wants():
    ledger = Ledger()
    assert ledger.add('Bike', 100).category == 'wants'
    assert ledger.add('Fund', 100, 'investment').category == 'investment'
    assert ledger.add('Thing', 100, 'unknown').category == 'wants'


def test_add_accepts_numeric_strings_and_trims_name():
    item = Ledger().add('  Phone ', '1500000')
    assert item.name == 'Phone'
    assert item.price == 1_500_000


@pytest.mark.parametrize('name', ['', '   ', None])
def test_add_rejects_empty_name_without_mutation(name):
    ledger = _seeded()
    before = ledger.items()
    with pytest.raises(ValidationError) as excinfo:
        ledger.add(name, 100)
    assert excinfo.value.reason == ValidationError.INVALID_NAME
    assert ledger.items() == before


@pytest.mark.parametrize('price', [0, -1, 'abc', '', None, float('nan'), float('inf')])
def test_add_rejects_invalid_price_without_mutation(price):
    ledger = _seeded()
    before = ledger.items()
    with pytest.raises(ValidationError) as excinfo:
        ledger.add('Valid', price)
    assert excinfo.value.reason == ValidationError.INVALID_PRICE
    assert ledger.items() == before


def test_add_then_remove_restores_previous_sequence():
    ledger = _seeded()
    before = ledger.items()
    item = ledger.add('Camera', 3_000_000, 'wants')
    assert ledger.remove(item.id) is True
    assert ledger.items() == before


def test_remove_missing_id_is_noop():
    ledger = _seeded()
    events = []
    ledger.subscribe(events.append)
    before = ledger.items()
    assert ledger.remove(999_999) is False
    assert ledger.items() == before
    assert events == []


def test_mutations_notify_listeners_until_unsubscribed():
    ledger = Ledger()
    events = []
    unsubscribe = ledger.subscribe(lambda changed: events.append(len(changed)))
    item = ledger.add('A', 1)
    ledger.remove(item.id)
    unsubscribe()
    ledger.add('B', 2)
    assert events == [1, 0]


def test_hydration_keeps_unique_ids_and_reassigns_duplicates():
    ledger = Ledger([
        BudgetItem(id=5, name='A', price=1),
        BudgetItem(id=5, name='B', price=2),
        BudgetItem(id=None, name='C', price=3),
        BudgetItem(id='legacy', name='D', price=4),
    ])
    ids = [item.id for item in ledger.items()]
    assert ids[0] == 5
    assert len(set(ids)) == 4
    assert all(isinstance(i, int) for i in ids)
    assert [item.name for item in ledger.items()] == ['A', 'B', 'C', 'D']
    assert ledger.add('E', 5).id > max(ids)


def test_items_is_a_snapshot():
    ledger = _seeded()
    snapshot = ledger.items()
    ledger.add('Later', 1)
    assert len(snapshot) == 2
    assert len(ledger) == 3


def test_to_frame_lists_items_in_order():
    frame = _seeded().to_frame()
    assert list(frame.columns) == ['id', 'name', 'price', 'category']
    assert frame['name'].tolist() == ['Laptop', 'Rent']
    assert frame['price'].sum() == 9_800_000


def test_to_frame_empty_ledger_has_columns():
    frame = Ledger().to_frame()
    assert frame.empty
    assert list(frame.columns) == ['id', 'name', 'price', 'category']


def test_add_rejects_price_beyond_float_range():
    ledger = Ledger()
    with pytest.raises(ValidationError) as excinfo:
        ledger.add('A', 10 ** 400)
    assert excinfo.value.reason == ValidationError.INVALID_PRICE
    assert ledger.items() == ()


def test_add_keeps_large_int_price_exact():
    assert Ledger().add('A', 9007199254740993).price == 9007199254740993
