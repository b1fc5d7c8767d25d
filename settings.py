import os
import json
import logging

logger = logging.getLogger(__name__)

SETTINGS_FILE = os.path.join(os.getcwd(), "settings.json")
DEFAULT_SETTINGS = {
    "dark_mode": True,
    "xlink_header_variant": "ELinkBOTW",
    "xlink_big_endian": False,
    "xlink_hash_list_path": "",  # empty uses resources/data/xlink/hashes.txt
    "export_folder": "",  # empty uses a folder named after the input file
    "export_indent": 2,
}


def load_settings(path: str = None):
    path = path or SETTINGS_FILE
    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                settings = json.load(f)
            # Ensure all default keys are present
            for key, value in DEFAULT_SETTINGS.items():
                settings.setdefault(key, value)
            return settings
        except (IOError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading settings: {e}")
    return DEFAULT_SETTINGS.copy()


def save_settings(settings, path: str = None):
    path = path or SETTINGS_FILE
    try:
        with open(path, "w") as f:
            json.dump(settings, f, indent=4)
    except IOError as e:
        logger.warning(f"Error saving settings: {e}")
