from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TESTS_DIR = Path(__file__).resolve().parent
for entry in (ROOT, TESTS_DIR):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

# Keep test runs from writing into the user's home log directory.
os.environ.setdefault("EXCELGRID_LOG_DIR", tempfile.mkdtemp(prefix="excelgrid-logs-"))
