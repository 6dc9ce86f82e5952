#!/usr/bin/env python3
"""Direct launcher for the Budget Planner.

This script launches Streamlit on the planner page with the project root on
the import path.
"""

import sys
import subprocess
import os
from pathlib import Path

# Get the project root and the app entry point
project_root = Path(__file__).parent.resolve()
app_path = project_root / "budget_planner" / "app.py"

if __name__ == "__main__":
    # Make the package importable from the Streamlit process
    os.environ["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(project_root), os.environ.get("PYTHONPATH")])
    )
    # Run Streamlit
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(app_path)
    ])
