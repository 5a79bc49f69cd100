"""
Shared fixtures for KRN tests.

Loads the cross-implementation testcases file that every KRN
implementation must satisfy.

Path resolution strategy:
- KRN_FIXTURES env var, else fixtures.path in .krn/config.yaml
- otherwise the copy bundled with this package (testcases.yaml)

Both YAML and JSON files are accepted (JSON is valid YAML).
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import yaml

from krn.utils.config import find_project_root, get_fixtures_path


REPO_ROOT = find_project_root()
TESTS_DIR = Path(__file__).resolve().parent
BUNDLED_TESTCASES = TESTS_DIR / "testcases.yaml"


def resolve_testcases_path(repo_root: Path = REPO_ROOT) -> Optional[Path]:
    """Return the testcases file to use, or None if it does not exist."""
    path = get_fixtures_path(repo_root) or BUNDLED_TESTCASES
    return path if path.exists() else None


def load_testcases(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a testcases file.

    Args:
        path: File to read (default: resolve_testcases_path())

    Returns:
        Parsed testcases, or empty dict if no file is available
    """
    path = path or resolve_testcases_path()
    if path is None:
        return {}
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


TESTCASES = load_testcases()


def cases(*keys: str) -> List[Any]:
    """
    Dig a list of cases out of TESTCASES for parametrize().

    Example:
        cases("operations", "parent") -> TESTCASES["operations"]["parent"]
    """
    node: Any = TESTCASES
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return []
        node = node[key]
    return list(node or [])


def case_id(case: Any) -> str:
    """Readable pytest id for a testcase entry."""
    if isinstance(case, dict):
        return str(case.get("name") or case.get("input") or "case")
    return repr(case)


@pytest.fixture(scope="session")
def testcases() -> Dict[str, Any]:
    """The full shared testcases document (skips if none is available)."""
    if not TESTCASES:
        pytest.skip("No KRN testcases file found")
    return TESTCASES
