from budget_planner.formatting import format_currency, format_time_to_target, unit_label
from budget_planner.models import BudgetItem, Projection, Settings
from budget_planner.projection import project


def test_format_currency_groups_with_dots():
    assert format_currency(12_800_000) == 'Rp 12.800.000'
    assert format_currency(999) == 'Rp 999'
    assert format_currency(0) == 'Rp 0'


def test_format_currency_rounds_for_display_only():
    assert format_currency(2_000_000 / 30) == 'Rp 66.667'
    assert format_currency(1234.4, include_symbol=False) == '1.234'
    assert format_currency(-1500.5) == 'Rp -1.501'


def test_format_time_to_target_pluralizes():
    items = [BudgetItem(id=1, name='A', price=7_800_000), BudgetItem(id=2, name='B', price=5_000_000)]
    assert format_time_to_target(project(items, Settings(income=10_000_000))) == '7 months'
    assert format_time_to_target(project(items, Settings(income=10_000_000, time_unit='year'))) == '1 year'


def test_format_time_to_target_not_available_without_savings():
    assert format_time_to_target(Projection(total_target=100)) == 'N/A'


def test_unit_label():
    assert unit_label('week') == 'Week'
