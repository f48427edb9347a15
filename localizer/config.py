import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from localizer.exceptions import ConfigError
from localizer.logger import get_logger
from localizer.validation import IgnoreConfig

logger = get_logger(__name__)

CONFIG_FILENAME = "localizer.json"
PACKAGE_JSON_BLOCK = "aiI18n"
PROJECT_ROOT_ENV = "LOCALIZER_PROJECT_ROOT"

# Source roots probed in order when package.json does not name one
SRC_ROOT_CANDIDATES = ("resources/js", "src")

DEFAULT_CONFIG = {
    "base_locale": "en",
    "locales": None,  # None => discover from the translations root
    "src_root": None,  # None => first existing entry of SRC_ROOT_CANDIDATES
    "translations_dir": None,  # None => <src_root>/i18n/auto
    "t_import_path": "@/i18n",
    "ignore_patterns_file": "scripts/i18n-ignore-patterns.json",
    "key_pattern": None,  # None => built-in dotted-key marker
    "commons_namespace": "Commons",
    "source_extensions": [".js", ".jsx", ".ts", ".tsx", ".vue", ".blade.php"],
    "log_mode": "info",  # off|info|debug
    "max_workers": 4,
    "sync_timeout": None,  # seconds; None => no deadline
}


@dataclass(frozen=True)
class ProjectPaths:
    project_root: Path
    src_root: Path
    translations_root: Path


def get_project_root(project_root=None) -> Path:
    """Resolve the project root: explicit argument, then env var, then cwd."""
    if project_root is not None:
        return Path(project_root)
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        return Path(env_root)
    return Path.cwd()


def _read_json_object(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object", code="invalid_config")
    return data


def _package_json_settings(root: Path) -> Dict[str, Any]:
    """Map the package.json aiI18n block onto config keys."""
    package_file = root / "package.json"
    if not package_file.exists():
        return {}
    try:
        block = _read_json_object(package_file).get(PACKAGE_JSON_BLOCK) or {}
    except (json.JSONDecodeError, ConfigError) as e:
        logger.warning(f"Ignoring unreadable {package_file}: {e}")
        return {}
    if not isinstance(block, dict):
        return {}

    settings = {}
    if isinstance(block.get("srcRoot"), str):
        settings["src_root"] = block["srcRoot"]
    if isinstance(block.get("locales"), list):
        settings["locales"] = [str(code) for code in block["locales"] if code]
    if isinstance(block.get("baseLocale"), str):
        settings["base_locale"] = block["baseLocale"]
    return settings


def load_config(project_root=None) -> Dict[str, Any]:
    """
    Load the effective configuration for a project.

    Defaults are overlaid with the package.json aiI18n block and then with
    localizer.json. A corrupt localizer.json raises ConfigError rather than
    silently running with defaults.
    """
    root = get_project_root(project_root)
    config = dict(DEFAULT_CONFIG)
    config.update(_package_json_settings(root))

    config_file = root / CONFIG_FILENAME
    if config_file.exists():
        try:
            config.update(_read_json_object(config_file))
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Failed to parse {config_file}: {e}",
                code="invalid_config",
                details={"path": str(config_file)},
            ) from e
        logger.debug(f"Configuration loaded from {config_file}")
    return config


def save_config(config: Dict[str, Any], project_root=None) -> Path:
    """Save the configuration to localizer.json at the project root."""
    config_file = get_project_root(project_root) / CONFIG_FILENAME
    try:
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=4, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        logger.error(f"Failed to save config to {config_file}: {e}")
        raise
    logger.info(f"Configuration saved to {config_file}")
    return config_file


def create_default_config(project_root=None) -> bool:
    """Write localizer.json with defaults if the project has none. Returns True if created."""
    config_file = get_project_root(project_root) / CONFIG_FILENAME
    if config_file.exists():
        return False
    save_config(DEFAULT_CONFIG, project_root)
    return True


def resolve_paths(config: Dict[str, Any], project_root=None) -> ProjectPaths:
    """Detect the source root and the translations root for a project."""
    root = get_project_root(project_root)

    src_root = None
    if config.get("src_root"):
        src_root = root / config["src_root"]
    else:
        for candidate in SRC_ROOT_CANDIDATES:
            if (root / candidate).is_dir():
                src_root = root / candidate
                break
    if src_root is None:
        src_root = root / SRC_ROOT_CANDIDATES[-1]

    if config.get("translations_dir"):
        translations_root = root / config["translations_dir"]
    else:
        translations_root = src_root / "i18n" / "auto"

    return ProjectPaths(project_root=root, src_root=src_root, translations_root=translations_root)


def load_ignore_config(config: Optional[Dict[str, Any]] = None, project_root=None) -> IgnoreConfig:
    """
    Load project ignore rules.

    A missing file means no rules; a malformed one is logged and treated
    the same way so extraction can still run.
    """
    config = config if config is not None else load_config(project_root)
    patterns_file = get_project_root(project_root) / config.get(
        "ignore_patterns_file", DEFAULT_CONFIG["ignore_patterns_file"]
    )
    if not patterns_file.exists():
        return IgnoreConfig()
    try:
        return IgnoreConfig.from_dict(_read_json_object(patterns_file))
    except (json.JSONDecodeError, ConfigError, re.error) as e:
        logger.warning(f"Ignoring malformed ignore patterns in {patterns_file}: {e}")
        return IgnoreConfig()


def initialize_app(project_root=None) -> Dict[str, Any]:
    """
    Initialize the application for a project.

    Creates the key registry database and returns the loaded configuration.
    """
    from localizer.core.schema import initialize_database

    logger.info("Initializing application...")
    config = load_config(project_root)
    initialize_database()
    logger.info("Application initialization complete")
    return config
