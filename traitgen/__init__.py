# traitgen/__init__.py
from traitgen.catalog import build_catalog, collect_layers, total_possible_combinations
from traitgen.errors import CapacityError, ConfigurationError, IncompleteCollectionError, TraitgenError
from traitgen.generator import (
    combination_key,
    generate_combinations,
    iter_combinations,
    reachable_combinations,
)
from traitgen.rarity import (
    analyze_distribution,
    calculate_rarity_score,
    rank_by_rarity,
    rarity_rating,
    rarity_warnings,
)
from traitgen.rng import MersenneTwister
from traitgen.session import GenerationSession

__version__ = "0.1.0"
