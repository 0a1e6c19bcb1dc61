import os
import yaml
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "family_tree.yml"
CONFIG_ENV_VAR = "FAMILY_TREE_CONFIG"

# Used when no config file can be found (e.g. a non-editable install).
DEFAULTS = {
    "paths": {"logs_dir": "logs"},
    "logging": {"level": "INFO", "file": "family_tree.log", "rotate": False, "to_file": False},
    "layout": {},
    "importer": {"repair_reciprocity": True},
    "session": {"default_member_name": "Me"},
    "debug": False,
}


class FTConfig:
    def __init__(self, data):
        self.paths = data.get("paths", {}) or {}
        self.logging = data.get("logging", {}) or {}
        self.layout = data.get("layout", {}) or {}
        self.importer = data.get("importer", {}) or {}
        self.session = data.get("session", {}) or {}
        self.debug = data.get("debug", False)


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_PATH


def load_config(path: Path | None = None) -> 'FTConfig':
    path = path or config_path()
    if not path.exists():
        if os.environ.get(CONFIG_ENV_VAR):
            raise FileNotFoundError(f"Config file not found: {path}")
        return FTConfig(DEFAULTS)

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return FTConfig(data)

_config_cache = None

def get_config() -> 'FTConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
