import itertools
import os
import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Must be set before any family_tree module loads its config
os.environ.setdefault("FAMILY_TREE_CONFIG", str(PROJECT_ROOT / "tests" / "data" / "test_config.yml"))


@pytest.fixture
def counter_ids():
    """Deterministic id factory yielding "2", "3", "4", ..."""
    counter = itertools.count(2)
    return lambda: str(next(counter))
