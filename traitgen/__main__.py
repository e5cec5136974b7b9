# traitgen/__main__.py
"""
Headless run of a saved config:

    python -m traitgen <config name> [quantity]

Reads configs/saved_configs.json and configs/saved_mappings.json from the
current directory.
"""
import sys

from PySide6.QtCore import QCoreApplication

from traitgen.catalog import collect_layers
from traitgen.errors import TraitgenError
from traitgen.persistence import load_config, merge_mapping_sets, metadata_from_rarities
from traitgen.rarity import rank_by_rarity, rarity_rating, rarity_warnings
from traitgen.session import GenerationSession
from traitgen.worker import GenerationWorker

TOP_RAREST = 5


def print_report(result):
    distribution = result["distribution"]
    combinations = result["combinations"]
    print(f"\nItems: {distribution['total_items']}" + (" (cancelled)" if result["cancelled"] else ""))
    if not result["cancelled"] and distribution["total_items"] < result["requested"]:
        print(f"⚠️ Only {distribution['total_items']} of {result['requested']} requested were generated.")
    for category, percents in distribution["category_percents"].items():
        print(f"  {category}")
        for trait, pct in sorted(percents.items(), key=lambda kv: -kv[1]):
            stars = "*" * rarity_rating(pct)
            print(f"    {trait:<30} {distribution['trait_counts'][category][trait]:>6}  {pct:6.2f}%  {stars}")

    warnings = rarity_warnings(distribution)
    if warnings:
        print("\nRarity warnings:")
    for w in warnings:
        print(f"  ⚠️ {w['message']}")

    ranked = rank_by_rarity(combinations, distribution)[:TOP_RAREST]
    if ranked:
        print("\nRarest:")
    for index, score in ranked:
        traits = ", ".join(f"{c}={t['trait_name']}" for c, t in combinations[index].items())
        print(f"  #{index + 1}  score {score:.2f}  {traits}")


def main(argv):
    if len(argv) < 2:
        print(__doc__.strip())
        return 2

    try:
        cfg = load_config(argv[1])
        session = GenerationSession.from_config(cfg.get("generation"))
        if len(argv) > 2:
            session.update_settings(collection_size=argv[2])

        layers = collect_layers(cfg.get("layers_dir", ""))
        rarities = merge_mapping_sets(cfg.get("mapping_sets", []), log_callback=print)
        catalog = session.build_catalog(
            layers,
            metadata_from_rarities(rarities),
            layer_order=cfg.get("layer_order"),
            excluded_layers=cfg.get("excluded_layers"),
        )
        session.validate(catalog)
    except TraitgenError as e:
        print(f"❌ {e}")
        return 1

    app = QCoreApplication(argv)
    worker = GenerationWorker(catalog, session.settings)
    worker.log_signal.connect(print)
    worker.done_signal.connect(print_report)
    worker.finished.connect(app.quit)
    worker.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main(sys.argv))
