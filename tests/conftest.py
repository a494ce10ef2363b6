import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Allow running the tests from a plain checkout without installing the package.
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
