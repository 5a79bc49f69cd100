"""
KRN Configuration Loader.

Locates the project root (the nearest directory holding .krn/) and loads
.krn/config.yaml for the krn command and the shared-fixture conformance
tests.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
FIXTURES_ENV_VAR = "KRN_FIXTURES"
MARKER_DIR = ".krn"
OUTPUT_FORMATS = ("yaml", "json")


def find_project_root(start: Optional[Path] = None) -> Path:
    """
    Return the nearest directory at or above start that holds a .krn/ directory.

    With no .krn/ anywhere up the tree, start itself (default: the working
    directory) is treated as the root and every setting takes its default.
    """
    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if (candidate / MARKER_DIR).is_dir():
            return candidate
    return origin


def load_krn_config(repo_root: Path) -> Dict[str, Any]:
    """
    Load .krn/config.yaml configuration file.

    Args:
        repo_root: Project root path

    Returns:
        Parsed configuration dict, or empty dict if the file is missing,
        empty or unreadable

    Example config:
        cli:
          format: json
        fixtures:
          path: ../krn-fixtures/testcases.json
    """
    config_path = repo_root / MARKER_DIR / CONFIG_FILENAME

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return {}

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.debug("Could not read %s: %s", config_path, e)
        return {}

    if not isinstance(config, dict):
        return {}

    logger.debug("Loaded config from %s", config_path)
    return config


def get_cli_config(repo_root: Path) -> Dict[str, Any]:
    """
    Get CLI-specific configuration.

    Args:
        repo_root: Project root path

    Returns:
        CLI configuration dict with defaults applied
    """
    config = load_krn_config(repo_root)
    cli_section = config.get("cli")
    cli_config = dict(cli_section) if isinstance(cli_section, dict) else {}

    defaults = {
        "format": "yaml",
    }

    for key, default_value in defaults.items():
        if key not in cli_config:
            cli_config[key] = default_value

    if cli_config["format"] not in OUTPUT_FORMATS:
        logger.warning(
            "Unknown output format %r in config, using yaml", cli_config["format"]
        )
        cli_config["format"] = "yaml"

    return cli_config


def get_fixtures_path(repo_root: Path) -> Optional[Path]:
    """
    Locate the shared cross-implementation testcases file.

    The KRN_FIXTURES environment variable wins over fixtures.path in the
    config file. Relative config paths are resolved against repo_root.

    Returns:
        Path to the fixture file, or None if none is configured
    """
    env_path = os.environ.get(FIXTURES_ENV_VAR)
    if env_path:
        return Path(env_path)

    config = load_krn_config(repo_root)
    fixtures = config.get("fixtures") or {}
    configured = fixtures.get("path") if isinstance(fixtures, dict) else None
    if not configured:
        return None

    path = Path(configured)
    if not path.is_absolute():
        path = repo_root / path
    return path
