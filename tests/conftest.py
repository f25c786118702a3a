import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make ``multidrag`` importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Shared test doubles live in ``tests/fakes.py``.
TESTS = Path(__file__).resolve().parent
if str(TESTS) not in sys.path:
    sys.path.insert(0, str(TESTS))
