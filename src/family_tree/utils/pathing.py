# src/family_tree/utils/pathing.py

from __future__ import annotations

from pathlib import Path
from typing import Union


# This file lives at <project_root>/src/family_tree/utils/pathing.py,
# so parents[3] is the project root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


def project_root() -> Path:
    """
    Return the absolute path to the project root directory.

    The project root is defined as the directory that contains:
      - src/
      - tests/
      - config/
    """
    return _PROJECT_ROOT


def resolve_project_path(relative: Union[str, Path]) -> Path:
    """
    Resolve a path relative to the project root.

    Examples:
        resolve_project_path("config/family_tree.yml")
        resolve_project_path(Path("tests") / "data" / "family.json")
    """
    return project_root() / Path(relative)


def tests_data_path(*parts: Union[str, Path]) -> Path:
    """
    Return the absolute path to a file under tests/data/.

    Examples:
        tests_data_path("family.json")
        tests_data_path("test_config.yml")
    """
    return resolve_project_path(Path("tests") / "data" / Path(*parts))
