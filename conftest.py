import sys
from pathlib import Path
import os

import pytest

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENV", "dev")
os.environ.setdefault("SCRIPT_BASE_WIDTH", "2560")
os.environ.setdefault("SCRIPT_BASE_HEIGHT", "1440")

from script_engines.script_transform.service import set_script_service  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_script_service():
    set_script_service(None)
    yield
    set_script_service(None)
