# io_utils/file_utils.py
"""
File naming and settings persistence helpers.
"""

import os
import datetime
import json
import logging

from fftcore.settings import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "fourier_sketchpad_settings.json"
SETTINGS_VERSION = 1


def default_settings_path() -> str:
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "fourier-sketchpad", SETTINGS_FILENAME)


def make_result_filename(
    projname: str,
    input_path: str,
    size: int,
    settings: Settings,
    desc: str,
    ext: str = "png",
    outdir: str = ".",
) -> str:
    base = os.path.splitext(os.path.basename(input_path))[0]
    timestamp = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
    safe_desc = str(desc).replace(" ", "_")
    fname = (
        f"{projname}_{base}_{size}px_{settings.center.value}_{settings.normalization.value}"
        f"_{safe_desc}_{timestamp}.{ext}"
    )
    os.makedirs(outdir, exist_ok=True)
    return os.path.join(outdir, fname)


def save_settings(path: str, settings: Settings) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    payload = {"version": SETTINGS_VERSION, "settings": settings.to_dict()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    return path


def load_settings(path: str) -> Settings:
    """
    Load settings saved by save_settings. Missing, unreadable or malformed
    files give the defaults; missing keys are filled from the defaults.
    """
    if not os.path.exists(path):
        return DEFAULT_SETTINGS
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        # ValueError covers bad JSON and bad UTF-8
        logger.warning("Could not read settings from %s: %s", path, e)
        return DEFAULT_SETTINGS

    data = payload.get("settings") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        logger.warning("Settings file %s has no settings table; using defaults.", path)
        return DEFAULT_SETTINGS
    return Settings.from_dict(data)
