import sys
from pathlib import Path


# Tests import the flat modules (config, models, main) and the services package straight from backend/src.
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
