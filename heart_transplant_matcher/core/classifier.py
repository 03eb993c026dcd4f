"""
Size-match classification of donor/recipient PHM ratios.

Category bands are the septile boundaries reported by Kransdorf et al.
(2019). The high-risk cut-off is a separate threshold and is not derived from
the category bands.
"""

from typing import List, Tuple

from .data_models import MatchCategory, RiskLevel


# Upper bounds (exclusive) of each band; anything above the last is O3
CATEGORY_UPPER_BOUNDS: List[Tuple[float, MatchCategory]] = [
    (0.863, MatchCategory.U3),
    (0.929, MatchCategory.U2),
    (0.983, MatchCategory.U1),
    (1.039, MatchCategory.R),
    (1.111, MatchCategory.O1),
    (1.221, MatchCategory.O2),
]

HIGH_RISK_RATIO_THRESHOLD = 0.86


def classify_category(ratio: float) -> MatchCategory:
    """Map a PHM ratio to its septile match category."""
    for upper_bound, category in CATEGORY_UPPER_BOUNDS:
        if ratio < upper_bound:
            return category
    return MatchCategory.O3


def classify_risk(ratio: float) -> RiskLevel:
    """High risk when the donor heart is undersized below the 0.86 ratio."""
    if ratio < HIGH_RISK_RATIO_THRESHOLD:
        return RiskLevel.HIGH_RISK
    return RiskLevel.ACCEPTABLE
