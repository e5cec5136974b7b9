# traitgen/generator.py
from bisect import bisect_right
from itertools import accumulate

from traitgen.logutil import safe_log
from traitgen.rng import MersenneTwister

# None: no give-up; the reachable-combinations bound ends the loop.
DEFAULT_MAX_ATTEMPTS = None


def combination_key(combination):
    """
    Canonical DNA for a combination: "Category:Trait" pairs sorted and joined
    with '|', so it does not depend on category iteration order.
    """
    return "|".join(sorted(f"{category}:{trait['trait_name']}" for category, trait in combination.items()))


# =========================================================
# Per-category samplers
# =========================================================
def _build_sampler(traits, respect_rarity):
    """
    Returns (traits, cumulative_weights, total_weight, last_positive_index).
    total_weight is 0 when sampling should be uniform: rarity ignored, or
    every trait in the category has weight 0.
    """
    if not respect_rarity:
        return traits, None, 0.0, None
    weights = [max(t["rarity_weight"], 0.0) for t in traits]
    total = sum(weights)
    if total <= 0:
        return traits, None, 0.0, None
    last_positive = max(i for i, w in enumerate(weights) if w > 0)
    return traits, list(accumulate(weights)), total, last_positive


def _pick(sampler, rng):
    """One PRNG draw per pick, in both weighted and uniform mode."""
    traits, cumulative, total, last_positive = sampler
    if total <= 0:
        return traits[rng.randbelow(len(traits))]
    r = rng.random() * total
    # bisect_right never lands on a zero-weight trait
    idx = bisect_right(cumulative, r)
    # r can round up to total; the last positive-weight trait owns that edge
    return traits[min(idx, last_positive)]


def reachable_combinations(catalog, respect_rarity=True):
    """
    Number of distinct combinations the sampler can actually produce.
    With rarity respected, zero-weight traits are unreachable unless a whole
    category is zero-weight (that category falls back to uniform).
    """
    total = 1
    for traits in catalog["categories"].values():
        if respect_rarity:
            positive = sum(1 for t in traits if t["rarity_weight"] > 0)
            total *= positive or len(traits)
        else:
            total *= len(traits)
    return total


# =========================================================
# Generation
# =========================================================
def iter_combinations(
    catalog,
    size,
    seed,
    avoid_duplicates=True,
    respect_rarity=True,
    max_attempts=DEFAULT_MAX_ATTEMPTS,
    log_callback=None,
    should_stop=None,
):
    """
    Yield trait combinations one at a time, in generation order.

    catalog: output of build_catalog
    size: requested collection size; clamped to the catalog's
          total_possible_combinations when avoid_duplicates is set
    seed: any int, reduced to 32 bits
    max_attempts: opt-in cap on consecutive duplicate draws (None for no limit)
    should_stop: optional callable checked once per attempt; returning True
                 ends the iteration early

    The output is fully determined by (catalog, size, seed, options).
    """
    categories = catalog["categories"]
    total_possible = catalog["total_possible_combinations"]

    if avoid_duplicates and size > total_possible:
        safe_log(
            log_callback,
            f"⚠️ Requested {size} combinations but only {total_possible} are possible. "
            f"Limiting to maximum available.",
        )
        size = total_possible
    if size <= 0:
        return

    samplers = [(category, _build_sampler(traits, respect_rarity)) for category, traits in categories.items()]
    reachable = reachable_combinations(catalog, respect_rarity)

    rng = MersenneTwister(seed)
    seen = set()
    produced = 0
    misses = 0

    while produced < size:
        if should_stop is not None and should_stop():
            return
        if avoid_duplicates and len(seen) >= reachable:
            safe_log(
                log_callback,
                f"⚠️ Only {reachable} combinations are reachable with current rarities; "
                f"stopping at {produced} of {size}.",
            )
            return

        combination = {category: _pick(sampler, rng) for category, sampler in samplers}
        dna = combination_key(combination)

        if avoid_duplicates:
            if dna in seen:
                misses += 1
                if max_attempts is not None and misses >= max_attempts:
                    safe_log(
                        log_callback,
                        f"⚠️ Gave up after {misses} consecutive duplicates; "
                        f"stopping at {produced} of {size}.",
                    )
                    return
                continue
            seen.add(dna)

        misses = 0
        produced += 1
        yield combination


def generate_combinations(
    catalog,
    size,
    seed,
    avoid_duplicates=True,
    respect_rarity=True,
    max_attempts=DEFAULT_MAX_ATTEMPTS,
    log_callback=None,
    should_stop=None,
):
    return list(
        iter_combinations(
            catalog,
            size,
            seed,
            avoid_duplicates=avoid_duplicates,
            respect_rarity=respect_rarity,
            max_attempts=max_attempts,
            log_callback=log_callback,
            should_stop=should_stop,
        )
    )
