"""Top‑level package for the Budget Planner.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``ledger`` – the ordered collection of savings targets
* ``projection`` – pure calculations of totals and time to target
* ``storage`` – persistence of the ledger and settings
* ``engine`` – the ``BudgetPlanner`` facade used by the UI
* ``app`` – a Streamlit page that ties everything together

To run the app from the command line you can execute:

```bash
python run_budget_planner.py
```
"""

from .engine import BudgetPlanner
from .errors import BudgetPlannerError, PersistenceError, ValidationError
from .ledger import Ledger
from .models import BudgetItem, Projection, Settings
from .projection import project
from .storage import JsonFileStore, MemoryStore, PersistenceSynchronizer

__all__ = [
    "BudgetPlanner",
    "BudgetPlannerError",
    "PersistenceError",
    "ValidationError",
    "Ledger",
    "BudgetItem",
    "Projection",
    "Settings",
    "project",
    "JsonFileStore",
    "MemoryStore",
    "PersistenceSynchronizer",
]
