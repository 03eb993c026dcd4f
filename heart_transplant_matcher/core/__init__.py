"""Core heart transplant matching engine."""

# Import main classes for easier access
from .data_models import (
    Gender,
    AboGroup,
    Rhesus,
    BloodType,
    MatchCategory,
    RiskLevel,
    BiometricProfile,
    Recipient,
    Donor,
    MatchRecord,
    SkippedRecipient,
    RunStatistics,
    MatchRun
)
from .exceptions import HeartMatchError, InvalidInput, ValidationError, RecordSkipped
from .phm_calculator import compute_phm, phm_ratio
from .classifier import classify_category, classify_risk
from .compatibility import CompatibilityPolicy, is_compatible, is_exact_match
from .match_builder import MatchBuilder, build_matches
from .ranker import RankingPolicy, RankingStage, rank

__all__ = [
    'Gender',
    'AboGroup',
    'Rhesus',
    'BloodType',
    'MatchCategory',
    'RiskLevel',
    'BiometricProfile',
    'Recipient',
    'Donor',
    'MatchRecord',
    'SkippedRecipient',
    'RunStatistics',
    'MatchRun',
    'HeartMatchError',
    'InvalidInput',
    'ValidationError',
    'RecordSkipped',
    'compute_phm',
    'phm_ratio',
    'classify_category',
    'classify_risk',
    'CompatibilityPolicy',
    'is_compatible',
    'is_exact_match',
    'MatchBuilder',
    'build_matches',
    'RankingPolicy',
    'RankingStage',
    'rank'
]
