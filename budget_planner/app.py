"""Budget Planner page - savings targets, projections and settings."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional

import streamlit as st

# Add project root to path for imports
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from budget_planner.config import configure_logging, ensure_data_directories
from budget_planner.engine import BudgetPlanner
from budget_planner.errors import PersistenceError, ValidationError
from budget_planner.formatting import format_currency, format_time_to_target, unit_label
from budget_planner.models import CATEGORIES, CATEGORY_LABELS, TIME_UNITS
from budget_planner.projection import category_frame
from budget_planner.theme import ColorSchemeSignal

PLANNER_KEY = 'budget_planner'
SIGNAL_KEY = 'budget_planner_scheme'
ERRORS_KEY = 'budget_planner_errors'

DARK_CSS = """
<style>
.stApp { background-color: #111827; color: #F9FAFB; }
</style>
"""


class StreamlitColorScheme(ColorSchemeSignal):
    """OS colour scheme as reported by the browser to Streamlit.

    Streamlit has no push channel for scheme changes, so ``refresh`` is
    called on every rerun and notifies subscribers when the value moved.
    """

    def __init__(self):
        self._dark = self._read()
        self._callbacks: List[Callable[[bool], None]] = []

    @staticmethod
    def _read() -> bool:
        context = getattr(st, 'context', None)
        theme = getattr(context, 'theme', None)
        return getattr(theme, 'type', None) == 'dark'

    def prefers_dark(self) -> bool:
        return self._dark

    def subscribe(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def refresh(self) -> None:
        current = self._read()
        if current != self._dark:
            self._dark = current
            for callback in list(self._callbacks):
                callback(current)


def _rerun() -> None:
    rerun_fn = getattr(st, 'rerun', None) or getattr(st, 'experimental_rerun', None)
    if rerun_fn:
        rerun_fn()


def _get_planner() -> BudgetPlanner:
    """Return the session's planner, creating it on first use."""
    state = st.session_state
    planner: Optional[BudgetPlanner] = state.get(PLANNER_KEY)
    if planner is None:
        signal = StreamlitColorScheme()
        planner = BudgetPlanner(signal=signal)
        state[SIGNAL_KEY] = signal
        state[ERRORS_KEY] = []
        planner.sync.subscribe_errors(lambda error: state[ERRORS_KEY].append(error))
        state[PLANNER_KEY] = planner
    else:
        signal = state.get(SIGNAL_KEY)
        if signal is not None:
            signal.refresh()
    return planner


def _drain_errors() -> List[PersistenceError]:
    errors = list(st.session_state.get(ERRORS_KEY, []))
    st.session_state[ERRORS_KEY] = []
    return errors


def _render_header(planner: BudgetPlanner) -> None:
    title_col, toggle_col = st.columns([6, 1])
    title_col.title("💰 Budget Planner")
    label = "☀️ Light" if planner.dark_mode else "🌙 Dark"
    if toggle_col.button(label, key='toggle_theme'):
        planner.toggle_theme()
        _rerun()
    if planner.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)


def _render_calculator(planner: BudgetPlanner) -> None:
    settings = planner.settings
    st.subheader("Budget Calculator")

    income_text = st.text_input(
        "Monthly Income",
        value='' if settings.income is None else str(settings.income),
        placeholder="Enter your monthly income",
    )
    if income_text != ('' if settings.income is None else str(settings.income)):
        try:
            planner.set_income(income_text)
        except ValidationError as e:
            st.error(e.message)

    wallet = st.number_input("Wallet", value=float(settings.wallet), step=1000.0)
    if wallet != settings.wallet:
        planner.set_wallet(wallet)

    percentage = st.slider("Savings Target (%)", 1, 100, value=settings.saving_percentage)
    if percentage != settings.saving_percentage:
        planner.set_saving_percentage(percentage)

    time_unit = st.radio(
        "Time unit",
        TIME_UNITS,
        index=TIME_UNITS.index(settings.time_unit),
        format_func=unit_label,
        horizontal=True,
    )
    if time_unit != settings.time_unit:
        planner.set_time_unit(time_unit)

    with st.form('add_item', clear_on_submit=True):
        name_col, price_col, category_col = st.columns([3, 2, 2])
        name = name_col.text_input("Item Name")
        price = price_col.text_input("Price")
        category = category_col.selectbox(
            "Category",
            CATEGORIES,
            index=CATEGORIES.index('wants'),
            format_func=CATEGORY_LABELS.get,
        )
        if st.form_submit_button("➕ Add item"):
            try:
                planner.add_item(name, price, category)
            except ValidationError as e:
                st.error(e.message)
            else:
                _rerun()


def _render_items(planner: BudgetPlanner) -> None:
    st.subheader("Items & Categories")
    items = planner.items()
    if not items:
        st.info("No items yet. Add something you are saving for.")
        return
    for item in items:
        name_col, price_col, delete_col = st.columns([4, 3, 1])
        name_col.markdown(f"**{item.name}**  \n{CATEGORY_LABELS[item.category]}")
        price_col.write(format_currency(item.price))
        if delete_col.button("🗑️", key=f"delete_item_{item.id}"):
            planner.remove_item(item.id)
            _rerun()


def _render_summary(planner: BudgetPlanner) -> None:
    projection = planner.projection
    cols = st.columns(3)
    cols[0].metric("Total Target", format_currency(projection.total_target))
    cols[1].metric(
        f"Savings per {unit_label(projection.time_unit)}",
        format_currency(projection.savings_per_unit),
    )
    cols[2].metric("Time to Target", format_time_to_target(projection))

    st.subheader("By Category")
    frame = category_frame(projection)
    frame['total'] = frame['total'].map(format_currency)
    frame['share'] = frame['share'].map(lambda share: f"{share:.0%}")
    st.dataframe(
        frame[['label', 'total', 'share']].rename(columns={'label': 'Category', 'total': 'Total', 'share': 'Share'}),
        use_container_width=True,
        hide_index=True,
    )


def main():
    """Render the Budget Planner page."""
    st.set_page_config(page_title="Budget Planner", page_icon="💰", layout="wide")
    configure_logging()
    ensure_data_directories()

    planner = _get_planner()
    _render_header(planner)

    left, right = st.columns(2)
    with left:
        _render_calculator(planner)
    with right:
        _render_items(planner)

    _render_summary(planner)

    for error in _drain_errors():
        st.warning(f"⚠️ Changes could not be saved: {error}")


if __name__ == "__main__":
    main()
