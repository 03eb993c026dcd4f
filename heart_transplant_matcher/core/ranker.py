"""
Recipient Ranker - deterministic ordering of match records.

A ranking policy is an ordered list of stages. Each stage maps a record to a
sort key where smaller sorts first; a later stage only decides between
records that every earlier stage considers equal. Records tied on every stage
keep their input order.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from .compatibility import CompatibilityPolicy
from .data_models import MatchRecord, RiskLevel


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingStage:
    """One criterion of a ranking policy."""
    name: str
    key: Callable[[MatchRecord], Any]
    description: str


def _date_sort_key(record: MatchRecord):
    """Earliest date first; records without a date go last."""
    added = record.date_added
    if added is None:
        return (1, datetime.min)

    if not isinstance(added, datetime):
        added = datetime.combine(added, time.min)
    elif added.tzinfo is not None:
        added = added.astimezone(timezone.utc).replace(tzinfo=None)
    return (0, added)


BLOOD_TYPE_COMPATIBILITY = RankingStage(
    name="blood_type_compatibility",
    key=lambda record: not record.blood_type_compatible,
    description="Blood type compatibility (compatible first)"
)

EXACT_BLOOD_TYPE_MATCH = RankingStage(
    name="exact_blood_type_match",
    key=lambda record: not record.exact_blood_type_match,
    description="Exact blood type match (exact first)"
)

RISK_LEVEL = RankingStage(
    name="risk_level",
    key=lambda record: record.risk_level is not RiskLevel.ACCEPTABLE,
    description="Risk level (Acceptable first)"
)

RATIO_PROXIMITY = RankingStage(
    name="ratio_proximity",
    key=lambda record: record.ratio_deviation,
    description="Proximity to ideal ratio (1.0)"
)

STATUS = RankingStage(
    name="status",
    key=lambda record: record.status,
    description="Waiting-list status (1 = most urgent first)"
)

DATE_ADDED = RankingStage(
    name="date_added",
    key=_date_sort_key,
    description="Date added to waiting list (earliest first)"
)

AVAILABLE_STAGES: Dict[str, RankingStage] = {
    stage.name: stage for stage in [
        BLOOD_TYPE_COMPATIBILITY,
        EXACT_BLOOD_TYPE_MATCH,
        RISK_LEVEL,
        RATIO_PROXIMITY,
        STATUS,
        DATE_ADDED,
    ]
}


@dataclass(frozen=True)
class RankingPolicy:
    """Named, ordered chain of ranking stages."""
    name: str
    stages: Sequence[RankingStage]
    compatibility_policy: CompatibilityPolicy = CompatibilityPolicy.FULL_CHART
    description: str = ""

    def __post_init__(self):
        """Validate policy configuration."""
        if not self.stages:
            raise ValueError("A ranking policy needs at least one stage")
        names = [stage.name for stage in self.stages]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate ranking stages in policy {self.name}: {names}")

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    def sort_key(self, record: MatchRecord) -> tuple:
        return tuple(stage.key(record) for stage in self.stages)

    @classmethod
    def from_stage_names(cls, name: str,
                         stage_names: Sequence[str],
                         compatibility_policy: CompatibilityPolicy = CompatibilityPolicy.FULL_CHART,
                         description: str = "") -> "RankingPolicy":
        """Assemble a policy from registered stage names."""
        unknown = [stage for stage in stage_names if stage not in AVAILABLE_STAGES]
        if unknown:
            raise ValueError(
                f"Unknown ranking stage(s): {', '.join(unknown)} "
                f"(available: {', '.join(AVAILABLE_STAGES)})"
            )

        return cls(
            name=name,
            stages=tuple(AVAILABLE_STAGES[stage] for stage in stage_names),
            compatibility_policy=compatibility_policy,
            description=description
        )


SIZE_MATCH_POLICY = RankingPolicy(
    name="size_match",
    stages=(BLOOD_TYPE_COMPATIBILITY, EXACT_BLOOD_TYPE_MATCH, RISK_LEVEL, RATIO_PROXIMITY),
    compatibility_policy=CompatibilityPolicy.FULL_CHART,
    description="Blood type, exact match, risk level, then closeness of PHM ratio to 1.0"
)

WAITING_LIST_POLICY = RankingPolicy(
    name="waiting_list",
    stages=(BLOOD_TYPE_COMPATIBILITY, RISK_LEVEL, STATUS, DATE_ADDED),
    compatibility_policy=CompatibilityPolicy.ABO_ONLY,
    description="ABO compatibility, risk level, status, then time on the waiting list"
)

RANKING_POLICIES: Dict[str, RankingPolicy] = {
    SIZE_MATCH_POLICY.name: SIZE_MATCH_POLICY,
    WAITING_LIST_POLICY.name: WAITING_LIST_POLICY,
}

DEFAULT_POLICY = SIZE_MATCH_POLICY


def get_policy(name: str) -> RankingPolicy:
    """Look up a preset ranking policy by name."""
    try:
        return RANKING_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown ranking policy: {name} (available: {', '.join(RANKING_POLICIES)})"
        ) from None


def rank(records: Sequence[MatchRecord], policy: Optional[RankingPolicy] = None) -> List[MatchRecord]:
    """
    Order match records under a ranking policy.

    Args:
        records: Match records, in input order
        policy: Ranking policy (default: size_match)

    Returns:
        New list with the records in rank order; the input is not modified
    """
    policy = policy or DEFAULT_POLICY
    logger.debug(f"Ranking {len(records)} records by {policy.name}: {', '.join(policy.stage_names)}")
    return sorted(records, key=policy.sort_key)
