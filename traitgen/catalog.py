# traitgen/catalog.py
import os

FULL_RARITY = 100


def collect_layers(layers_dir):
    """
    Return dict: { category: [{"id": file_name, "name": trait_name}, ...] }
    One category per sub-folder; only .png files count, trait_name is the
    filename stem. Folders without images are left out.
    """
    out = {}
    if not os.path.isdir(layers_dir):
        return out
    for layer in sorted(os.listdir(layers_dir)):
        lp = os.path.join(layers_dir, layer)
        if not os.path.isdir(lp):
            continue
        traits = []
        for f in sorted(os.listdir(lp)):
            if f.lower().endswith(".png"):
                traits.append({"id": f, "name": os.path.splitext(f)[0]})
        if traits:
            out[layer] = traits
    return out


def _trait_rarity(trait_metadata, category, trait_name):
    """
    Rarity percent (0-100) for one trait. Missing or unreadable entries are
    full rarity. Accepts { cat: { trait: {"rarity": n} } } as well as the
    nested { cat: { "traits": { trait: {"rarity": n} } } } form.
    """
    cat_meta = (trait_metadata or {}).get(category) or {}
    if isinstance(cat_meta.get("traits"), dict):
        cat_meta = cat_meta["traits"]
    entry = cat_meta.get(trait_name) or {}
    value = entry.get("rarity") if isinstance(entry, dict) else entry
    if value is None:
        return FULL_RARITY
    try:
        value = float(value)
    except (TypeError, ValueError):
        return FULL_RARITY
    return min(max(value, 0.0), float(FULL_RARITY))


def total_possible_combinations(categories):
    total = 1
    for traits in categories.values():
        total *= len(traits)
    return total


def build_catalog(layers, trait_metadata=None, respect_rarity=True, layer_order=None, excluded_layers=None):
    """
    Normalize a raw layer listing into a weighted trait catalog.

    layers:          { category: [{"id", "name"}, ...] }
    trait_metadata:  { category: { trait_name: {"rarity": 0-100} } }
    layer_order:     optional explicit category order; unlisted categories are dropped
    excluded_layers: categories to leave out entirely

    Returns:
      {
        "categories": { category: [TraitRecord, ...] },
        "total_possible_combinations": int,
      }
    where TraitRecord = {"category", "id", "trait_name", "rarity_weight"}.
    """
    excluded = set(excluded_layers or [])
    order = list(layer_order) if layer_order else list(layers.keys())

    categories = {}
    for category in order:
        if category in excluded or category in categories:
            continue
        entries = layers.get(category) or []
        if not entries:
            continue

        records = []
        for layer in entries:
            trait_name = layer.get("name") or layer.get("id")
            if respect_rarity:
                weight = _trait_rarity(trait_metadata, category, trait_name) / 100.0
            else:
                weight = 1.0
            records.append({
                "category": category,
                "id": layer.get("id", trait_name),
                "trait_name": trait_name,
                "rarity_weight": weight,
            })
        categories[category] = records

    return {
        "categories": categories,
        "total_possible_combinations": total_possible_combinations(categories),
    }
