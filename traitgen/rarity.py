# traitgen/rarity.py


def analyze_distribution(combinations):
    """
    Count how often each trait occurs in a generated collection.

    Returns:
      {
        "trait_counts": { category: { trait_name: int } },
        "category_percents": { category: { trait_name: float } },
        "total_items": int,
      }
    Percentages are 100 * count / total_items, unrounded. An empty collection
    yields empty mappings.
    """
    trait_counts = {}
    for combination in combinations:
        for category, trait in combination.items():
            counts = trait_counts.setdefault(category, {})
            name = trait["trait_name"]
            counts[name] = counts.get(name, 0) + 1

    total_items = len(combinations)
    category_percents = {}
    if total_items:
        for category, counts in trait_counts.items():
            category_percents[category] = {
                name: count / total_items * 100 for name, count in counts.items()
            }

    return {
        "trait_counts": trait_counts,
        "category_percents": category_percents,
        "total_items": total_items,
    }


def calculate_rarity_score(combination, distribution):
    """Sum of 100 / percent over the combination's traits; higher is rarer."""
    score = 0.0
    percents = distribution.get("category_percents", {})
    for category, trait in combination.items():
        percent = percents.get(category, {}).get(trait["trait_name"])
        if percent:
            score += 100 / percent
    return score


def rank_by_rarity(combinations, distribution):
    """
    Returns [(index, score), ...] rarest first. Equal scores keep
    generation order.
    """
    scored = [(i, calculate_rarity_score(c, distribution)) for i, c in enumerate(combinations)]
    scored.sort(key=lambda item: -item[1])
    return scored


# =========================================================
# Rarity audit
# =========================================================
DEFAULT_WARNING_THRESHOLD = 10

# (upper bound on percent, rating); anything at or above the last bound rates 1
RATING_CUTOFFS = ((5, 5), (10, 4), (20, 3), (40, 2))


def rarity_rating(percent):
    """1-5 rating for a trait's share of the collection, 5 being rarest."""
    for bound, rating in RATING_CUTOFFS:
        if percent < bound:
            return rating
    return 1


def rarity_warnings(distribution, threshold=DEFAULT_WARNING_THRESHOLD):
    """
    Flag traits whose realized share is extreme.

    A trait is "rare" below threshold percent and "common" above
    100 - threshold. Returns a list of
      { "category", "trait", "percentage", "type": "rare"|"common", "message" }
    in report order.
    """
    warnings = []
    for category, percents in distribution.get("category_percents", {}).items():
        for trait, pct in percents.items():
            if pct < threshold:
                warnings.append({
                    "category": category,
                    "trait": trait,
                    "percentage": pct,
                    "type": "rare",
                    "message": f'"{trait}" in "{category}" appears in only {pct:.1f}% of the collection.',
                })
            if pct > 100 - threshold:
                warnings.append({
                    "category": category,
                    "trait": trait,
                    "percentage": pct,
                    "type": "common",
                    "message": f'"{trait}" in "{category}" appears in {pct:.1f}% of the collection.',
                })
    return warnings
