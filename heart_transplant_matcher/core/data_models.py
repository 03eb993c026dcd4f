"""
Heart Transplant Matching Data Models

This module defines the value types shared by the matching engine: biometric
profiles, blood types, donor and recipient records, and the enriched match
records produced for a single matching run.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Union
from enum import Enum


LOWEST_PRIORITY_STATUS = 7


class Gender(str, Enum):
    """Biological sex used to select the PHM regression coefficients."""
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Union["Gender", str]) -> "Gender":
        """Case-insensitive lookup; raises ValueError for anything else."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unrecognized gender: {value!r}")
        return cls(value.strip().lower())


class AboGroup(str, Enum):
    """ABO blood group."""
    A = "A"
    B = "B"
    AB = "AB"
    O = "O"


class Rhesus(str, Enum):
    """Rhesus (Rh) sign."""
    POSITIVE = "+"
    NEGATIVE = "-"


@dataclass(frozen=True)
class BloodType:
    """One of the eight ABO/Rhesus combinations."""
    abo: AboGroup
    rhesus: Rhesus

    @classmethod
    def parse(cls, value: str) -> "BloodType":
        """
        Parse a literal blood type such as 'AB+' or 'O-'.

        The Unicode minus sign is accepted as '-'. Raises ValueError when the
        value is not one of the eight literal combinations.
        """
        if not isinstance(value, str):
            raise ValueError(f"Unrecognized blood type: {value!r}")

        text = value.strip().upper().replace("−", "-")
        if len(text) < 2:
            raise ValueError(f"Unrecognized blood type: {value!r}")

        try:
            return cls(abo=AboGroup(text[:-1]), rhesus=Rhesus(text[-1]))
        except ValueError:
            raise ValueError(f"Unrecognized blood type: {value!r}") from None

    def __str__(self) -> str:
        return f"{self.abo.value}{self.rhesus.value}"


class MatchCategory(Enum):
    """Septile size-mismatch bands, ordered from most undersized to most oversized."""
    U3 = "U3 - Severely Undersized"
    U2 = "U2 - Moderately Undersized"
    U1 = "U1 - Mildly Undersized"
    R = "R - Well-Matched"
    O1 = "O1 - Mildly Oversized"
    O2 = "O2 - Moderately Oversized"
    O3 = "O3 - Severely Oversized"

    @property
    def code(self) -> str:
        return self.name

    @property
    def label(self) -> str:
        return self.value


class RiskLevel(Enum):
    """Size-mismatch risk level."""
    ACCEPTABLE = "Acceptable"
    HIGH_RISK = "High Risk"


@dataclass(frozen=True)
class BiometricProfile:
    """
    Anthropometric inputs to the PHM formula.

    Height may be given in centimeters or meters; the calculator decides.
    Values are validated by the calculator, not here, so that a malformed
    recipient can be reported instead of failing at construction.
    """
    gender: Union[Gender, str, None]
    age: Optional[float]
    height: Optional[float]
    weight: Optional[float]


@dataclass(frozen=True)
class Recipient:
    """A waiting-list candidate as handed over by the ingestion layer."""
    recipient_id: str
    name: str
    profile: BiometricProfile
    blood_type: Optional[BloodType] = None
    status: Optional[int] = None
    date_added: Optional[Union[date, datetime]] = None

    @property
    def effective_status(self) -> int:
        """Priority status, defaulting to the lowest priority when absent."""
        if self.status is None:
            return LOWEST_PRIORITY_STATUS
        return self.status

    def days_on_waiting_list(self, now: Union[date, datetime]) -> Optional[int]:
        """Whole days between date_added and the supplied 'now'."""
        if self.date_added is None:
            return None

        added = self.date_added
        if isinstance(added, datetime):
            added = added.date()
        if isinstance(now, datetime):
            now = now.date()
        return (now - added).days


@dataclass(frozen=True)
class Donor:
    """The single donor of a matching run."""
    name: str
    profile: BiometricProfile
    blood_type: Optional[BloodType] = None


@dataclass(frozen=True)
class MatchRecord:
    """A recipient enriched with the size and blood-type match against the donor."""
    recipient: Recipient
    donor_phm: float
    recipient_phm: float
    phm_ratio: float
    match_category: MatchCategory
    risk_level: RiskLevel
    blood_type_compatible: bool
    exact_blood_type_match: bool
    rhesus_mismatch: bool = False
    status: int = LOWEST_PRIORITY_STATUS
    date_added: Optional[Union[date, datetime]] = None

    @property
    def ratio_deviation(self) -> float:
        """Distance of the PHM ratio from the ideal 1.0."""
        return abs(self.phm_ratio - 1.0)

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level is RiskLevel.HIGH_RISK

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary representation."""
        recipient = self.recipient
        return {
            'id': recipient.recipient_id,
            'name': recipient.name,
            'gender': recipient.profile.gender.value
            if isinstance(recipient.profile.gender, Gender) else recipient.profile.gender,
            'age': recipient.profile.age,
            'blood_type': str(recipient.blood_type) if recipient.blood_type else None,
            'status': self.status,
            'date_added': self.date_added.isoformat() if self.date_added else None,
            'donor_phm': self.donor_phm,
            'recipient_phm': self.recipient_phm,
            'phm_ratio': self.phm_ratio,
            'match_category': self.match_category.label,
            'risk_level': self.risk_level.value,
            'blood_type_compatible': self.blood_type_compatible,
            'exact_blood_type_match': self.exact_blood_type_match,
            'rhesus_mismatch': self.rhesus_mismatch,
        }


@dataclass(frozen=True)
class SkippedRecipient:
    """A recipient left out of the ranking, with the reason."""
    recipient_id: str
    name: str
    field: Optional[str]
    reason: str


@dataclass
class RunStatistics:
    """Statistics for a matching run."""
    total_recipients: int = 0
    matched: int = 0
    skipped: int = 0
    blood_type_compatible: int = 0
    exact_blood_type_matches: int = 0
    high_risk: int = 0
    rhesus_mismatches: int = 0
    category_distribution: Dict[str, int] = field(default_factory=dict)

    def get_compatible_rate(self) -> float:
        """Share of matched recipients that are blood-type compatible."""
        if self.matched == 0:
            return 0.0
        return self.blood_type_compatible / self.matched

    def get_skip_rate(self) -> float:
        """Share of input recipients that could not be matched."""
        if self.total_recipients == 0:
            return 0.0
        return self.skipped / self.total_recipients


@dataclass
class MatchRun:
    """Output of one donor-against-waiting-list matching run."""
    donor: Donor
    donor_phm: float
    records: List[MatchRecord]
    skipped: List[SkippedRecipient]
    policy_name: str
    statistics: RunStatistics
    ranking_criteria: List[str] = field(default_factory=list)
