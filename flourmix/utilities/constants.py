from typing import Final, Tuple

CATALOGS: Final[Tuple[str, ...]] = ("public", "enterprise", "private")
DEFAULT_CATALOG: Final[str] = "public"

NUTRITIONAL_FIELDS: Final[Tuple[str, ...]] = ("proteins", "lipids", "carbs", "fiber", "moisture", "ash")
PROTEIN_FIELDS: Final[Tuple[str, ...]] = ("albumins", "globulins", "prolamins", "glutelins")
ENZYME_FIELDS: Final[Tuple[str, ...]] = ("amylases", "proteases", "lipases", "phytases")
ANTI_NUTRIENT_FIELDS: Final[Tuple[str, ...]] = (
    "lectins", "tannins", "saponins", "phytic_acid", "trypsin_inhibitors"
)
MECHANICAL_FIELDS: Final[Tuple[str, ...]] = ("binding", "stickiness", "water_absorption")

# Contribution tables store a nested "all values" object under these keys
ANTI_NUTRIENTS_NESTED_KEY: Final[str] = "contribution_anti_nutrientsyall"
ENZYMES_NESTED_KEY: Final[str] = "contribution_enzymesyall"
ANTI_NUTRIENTS_TOTAL_KEY: Final[str] = "anti_nutrients_total_contri"
ENZYMES_TOTAL_KEY: Final[str] = "enzymes_total_contri"

# Qualitative rating -> numeric magnitude for anti-nutrient fallback
ANTI_NUTRIENT_RATING_VALUES: Final[dict[str, float]] = {"low": 0.5, "medium": 1.5, "high": 2.5}

# Category <-> score for mechanical properties and solubility
CATEGORY_SCORES: Final[dict[str, int]] = {"low": 1, "medium": 2, "high": 3}
CATEGORY_LOW_MAX: Final[float] = 1.67
CATEGORY_MEDIUM_MAX: Final[float] = 2.33
# Decimals kept on a weighted category score before bucketing
CATEGORY_SCORE_DIGITS: Final[int] = 6

# Anti-nutrient grand total buckets
ANTI_NUTRIENT_LOW_MAX: Final[float] = 5
ANTI_NUTRIENT_MEDIUM_MAX: Final[float] = 10

PERCENTAGE_TOTAL: Final[float] = 100.0
PERCENTAGE_TOLERANCE: Final[float] = 0.1

# Combination weights accepted from interactive input
MIN_COMBINE_WEIGHT: Final[float] = 0.1
MAX_COMBINE_WEIGHT: Final[float] = 10.0
DEFAULT_COMBINE_WEIGHT: Final[float] = 1.0

EXPORT_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
