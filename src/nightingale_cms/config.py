import os
from pathlib import Path

import yaml

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "nightingale_cms.yml"

DEFAULTS = {
    "paths": {"data_file": "Data/nightingale-data.json", "logs_dir": "logs"},
    "logging": {"level": "INFO", "file": "nightingale_cms.log", "rotate": False, "to_file": True},
    "report": {"max_rows": 25},
    "migration": {"apply_fixes": True},
    "debug": False,
}


class NCConfig:
    def __init__(self, data):
        self.paths = {**DEFAULTS["paths"], **(data.get("paths") or {})}
        self.logging = {**DEFAULTS["logging"], **(data.get("logging") or {})}
        self.report = {**DEFAULTS["report"], **(data.get("report") or {})}
        self.migration = {**DEFAULTS["migration"], **(data.get("migration") or {})}
        self.debug = bool(data.get("debug", False))


def config_path() -> Path:
    override = os.environ.get("NIGHTINGALE_CONFIG")
    return Path(override) if override else CONFIG_PATH


def load_config() -> 'NCConfig':
    path = config_path()
    if not path.exists():
        # Installed without the repo checkout; run on defaults
        return NCConfig({})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return NCConfig(data)

_config_cache = None

def get_config() -> 'NCConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
