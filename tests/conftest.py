from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Package loggers are configured at import time; keep their files out of $HOME.
os.environ.setdefault("SHEETFLOW_LOG_DIR", tempfile.mkdtemp(prefix="sheetflow-logs-"))
