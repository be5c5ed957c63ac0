"""Pre-DB bootstrap configuration. Imports nothing from the rest of the app
except constants.

Stores preferences that must be known before opening the DB (db_folder,
log_level) plus the household's person labels.
Config lives in ~/.household_budget/config.json; set HOUSEHOLD_BUDGET_HOME to
move it.
"""
import json
import os
from pathlib import Path

from utils.constants import DEFAULT_PERSON_LABELS, SHARED_PERSON_LABEL


def config_dir() -> Path:
    override = os.environ.get("HOUSEHOLD_BUDGET_HOME")
    if override:
        return Path(override)
    return Path.home() / ".household_budget"


def config_file() -> Path:
    return config_dir() / "config.json"


def load_config() -> dict:
    """Returns {} on a missing or corrupt file; never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    path = config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_log_level() -> str:
    return str(load_config().get("log_level", "INFO")).upper()


def get_person_labels() -> list[str]:
    """Configured household members; the shared label is always last."""
    labels = load_config().get("person_labels")
    if not isinstance(labels, list) or not labels:
        return list(DEFAULT_PERSON_LABELS)
    result = [str(l).strip() for l in labels if str(l).strip()]
    result = [l for l in result if l != SHARED_PERSON_LABEL]
    return result + [SHARED_PERSON_LABEL]
