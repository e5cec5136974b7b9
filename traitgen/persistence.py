# traitgen/persistence.py
import json
import os

from traitgen.errors import ConfigurationError
from traitgen.logutil import safe_log


CONFIGS_DIR = "configs"
SAVED_CONFIGS_PATH = os.path.join(CONFIGS_DIR, "saved_configs.json")
SAVED_MAPPINGS_PATH = os.path.join(CONFIGS_DIR, "saved_mappings.json")


# =========================================================
# Helpers for JSON persistence
# =========================================================
def load_json(path, default):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default


def save_json(path, data):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4)


def load_config(name, configs_path=SAVED_CONFIGS_PATH):
    configs = load_json(configs_path, {})
    cfg = configs.get(name)
    if not cfg:
        raise ConfigurationError(f"Config '{name}' not found in {configs_path}.")
    return cfg


def save_config(name, config, configs_path=SAVED_CONFIGS_PATH):
    configs = load_json(configs_path, {})
    configs[name] = config
    save_json(configs_path, configs)


# =========================================================
# Mapping sets (rarity tables)
# =========================================================
def merge_mapping_sets(mapping_sets, mappings_path=SAVED_MAPPINGS_PATH, log_callback=None):
    """
    Merge named mapping sets into a single rarity table.
    Later sets in mapping_sets override earlier rarities.

    Returns { "Layer:Trait": int(0-100) }
    """
    trait_rarities = {}
    saved = load_json(mappings_path, {})

    for name in mapping_sets or []:
        m = saved.get(name)
        if not m:
            safe_log(log_callback, f"⚠️ Mapping set '{name}' not found.")
            continue

        for k, v in (m.get("rarities", {}) or {}).items():
            try:
                trait_rarities[k] = int(v)
            except (TypeError, ValueError):
                safe_log(log_callback, f"⚠️ Ignoring non-numeric rarity for '{k}': {v!r}")

    return trait_rarities


def metadata_from_rarities(trait_rarities):
    """
    Convert a flat { "Layer:Trait": rarity } table into the
    { layer: { trait: {"rarity": rarity} } } shape the catalog builder reads.
    Keys without a ':' separator are ignored.
    """
    metadata = {}
    for key, rarity in trait_rarities.items():
        if ":" not in key:
            continue
        layer, trait = key.split(":", 1)
        metadata.setdefault(layer, {})[trait] = {"rarity": rarity}
    return metadata
