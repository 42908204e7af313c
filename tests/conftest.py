"""Shared Hypothesis strategies and fixtures for the test suite.

Provides strategies for messy row sets (mixed numbers, numeric strings,
junk strings, booleans and missing values) and small example datasets.
"""

from __future__ import annotations

import pytest
from hypothesis import strategies as st

from vizpilot.models import TabularDataset

# ---------------------------------------------------------------------------
# Cell strategies
# ---------------------------------------------------------------------------

numeric_cells = st.one_of(
    st.integers(min_value=-10_000, max_value=10_000),
    st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False),
)

messy_cells = st.one_of(
    st.none(),
    numeric_cells,
    st.booleans(),
    st.sampled_from(["", "abc", "12.5", " 7 ", "n/a", "-3"]),
)

category_cells = st.one_of(
    st.none(),
    st.sampled_from([f"cat_{i}" for i in range(25)]),
)


# ---------------------------------------------------------------------------
# messy_datasets — generates TabularDatasets with controlled messiness
# ---------------------------------------------------------------------------


@st.composite
def messy_datasets(draw: st.DrawFn, min_rows: int = 0, max_rows: int = 80) -> TabularDataset:
    """Generate a dataset with columns ``num``, ``other`` and ``cat``.

    ``num`` and ``other`` mix numbers, numeric strings, junk strings,
    booleans and ``None``; ``cat`` holds up to 25 category labels.
    """
    rows = draw(
        st.lists(
            st.fixed_dictionaries(
                {"num": messy_cells, "other": messy_cells, "cat": category_cells}
            ),
            min_size=min_rows,
            max_size=max_rows,
        )
    )
    return TabularDataset(name="generated.csv", columns=["num", "other", "cat"], rows=rows)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sales_dataset() -> TabularDataset:
    """Small sales table with numeric, categorical and boolean columns."""
    return TabularDataset.from_records(
        "sales.csv",
        [
            {"product": "Widget", "region": "North", "revenue": 10, "units": 1, "promo": True},
            {"product": "Gadget", "region": "South", "revenue": 20, "units": 2, "promo": False},
            {"product": "Widget", "region": "South", "revenue": 30, "units": 3, "promo": False},
            {"product": "Doohickey", "region": "North", "revenue": 40, "units": 4, "promo": True},
            {"product": "Widget", "region": "East", "revenue": 50, "units": 5, "promo": False},
        ],
    )


@pytest.fixture
def customers_dataset() -> TabularDataset:
    return TabularDataset.from_records(
        "customers.csv",
        [
            {"customer": "Alice", "age": 30, "segment": "retail"},
            {"customer": "Bob", "age": 25, "segment": "wholesale"},
            {"customer": "Eve", "age": None, "segment": "retail"},
        ],
    )
