# traitgen/session.py
"""
Generation session: holds the settings for the next run and the collection
produced by the last one.

The session is the boundary where oversized requests are rejected. The
sampler underneath only clamps, so callers going through here get an
explicit CapacityError (checked against the reachable combinations) before
sampling, or IncompleteCollectionError if a capped run still ends short.
"""
import time

from traitgen.catalog import build_catalog
from traitgen.errors import CapacityError, ConfigurationError, IncompleteCollectionError
from traitgen.generator import DEFAULT_MAX_ATTEMPTS, iter_combinations, reachable_combinations
from traitgen.logutil import safe_log
from traitgen.rarity import analyze_distribution
from traitgen.rng import normalize_seed


def time_seed():
    return normalize_seed(int(time.time() * 1000))


def default_settings():
    return {
        "collection_size": 10,
        "seed": time_seed(),
        "respect_rarity": True,
        "avoid_duplicates": True,
        "max_attempts": DEFAULT_MAX_ATTEMPTS,
    }


class GenerationSession:
    def __init__(self, settings=None):
        self.settings = default_settings()
        if settings:
            self.update_settings(**settings)

        self.combinations = []
        self.distribution = None
        self.progress = 0
        self.is_generating = False
        self.error = None

    # --- Settings ---
    def update_settings(self, **changes):
        unknown = sorted(set(changes) - set(self.settings))
        if unknown:
            raise ConfigurationError(f"Unknown generation setting(s): {', '.join(unknown)}")

        if "collection_size" in changes:
            try:
                size = int(changes["collection_size"])
            except (TypeError, ValueError):
                raise ConfigurationError(f"collection_size must be an integer, got {changes['collection_size']!r}")
            if size < 0:
                raise ConfigurationError("collection_size must be >= 0")
            changes["collection_size"] = size
        if "seed" in changes:
            changes["seed"] = normalize_seed(changes["seed"])
        if changes.get("max_attempts") is not None:
            try:
                attempts = int(changes["max_attempts"])
            except (TypeError, ValueError):
                raise ConfigurationError(f"max_attempts must be an integer, got {changes['max_attempts']!r}")
            if attempts <= 0:
                raise ConfigurationError("max_attempts must be > 0 (or None for no limit)")
            changes["max_attempts"] = attempts
        for flag in ("respect_rarity", "avoid_duplicates"):
            if flag in changes and not isinstance(changes[flag], bool):
                raise ConfigurationError(f"{flag} must be true or false, got {changes[flag]!r}")

        self.settings.update(changes)

    def new_seed(self):
        self.settings["seed"] = time_seed()
        return self.settings["seed"]

    def to_config(self):
        return dict(self.settings)

    @classmethod
    def from_config(cls, config):
        return cls(settings=config or {})

    # --- Generation ---
    def build_catalog(self, layers, trait_metadata=None, layer_order=None, excluded_layers=None):
        return build_catalog(
            layers,
            trait_metadata,
            respect_rarity=self.settings["respect_rarity"],
            layer_order=layer_order,
            excluded_layers=excluded_layers,
        )

    def validate(self, catalog):
        """
        Raise CapacityError if the current settings cannot be met by catalog.
        With rarity respected, zero-weight traits do not count toward capacity.
        """
        size = self.settings["collection_size"]
        available = reachable_combinations(catalog, self.settings["respect_rarity"])
        if self.settings["avoid_duplicates"] and size > available:
            raise CapacityError(size, available)

    def generate_collection(
        self,
        layers,
        trait_metadata=None,
        progress_callback=None,
        log_callback=None,
        layer_order=None,
        excluded_layers=None,
    ):
        """
        Build the catalog, validate, generate and analyze.
        Replaces the previous collection on success; leaves it untouched when
        validation fails. A run that ends short of collection_size (max_attempts
        reached) keeps the partial collection, records error and raises
        IncompleteCollectionError.
        """
        self.is_generating = True
        self.progress = 0
        self.error = None
        try:
            catalog = self.build_catalog(layers, trait_metadata, layer_order, excluded_layers)
            self.validate(catalog)

            size = self.settings["collection_size"]
            combinations = []
            for combination in iter_combinations(
                catalog,
                size,
                self.settings["seed"],
                avoid_duplicates=self.settings["avoid_duplicates"],
                respect_rarity=self.settings["respect_rarity"],
                max_attempts=self.settings["max_attempts"],
                log_callback=log_callback,
            ):
                combinations.append(combination)
                self.progress = int(len(combinations) * 100 / size)
                if progress_callback:
                    progress_callback(len(combinations), size)

            self.combinations = combinations
            self.distribution = analyze_distribution(combinations)
            if len(combinations) < size:
                raise IncompleteCollectionError(size, combinations)

            self.progress = 100
            safe_log(log_callback, f"✅ Generated {len(combinations)} combinations (seed {self.settings['seed']})")
            return combinations
        except Exception as e:
            self.error = str(e) or "Generation failed"
            raise
        finally:
            self.is_generating = False

    def clear_collection(self):
        self.combinations = []
        self.distribution = None
        self.progress = 0

    def get_nft(self, index):
        if 0 <= index < len(self.combinations):
            return self.combinations[index]
        return None

    def total_nfts(self):
        return len(self.combinations)
