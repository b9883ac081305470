#!/usr/bin/env python3
"""Direct launcher for the Budget Tracker dashboard.

This script launches Streamlit on ``budget_tracker/dashboard.py`` from the
project root so the package imports resolve.
"""

import sys
import subprocess
from pathlib import Path

project_root = Path(__file__).parent.resolve()
dashboard_path = project_root / "budget_tracker" / "dashboard.py"

if __name__ == "__main__":
    sys.exit(subprocess.call([
        sys.executable, "-m", "streamlit", "run",
        str(dashboard_path),
    ], cwd=project_root))
