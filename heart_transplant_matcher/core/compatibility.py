"""
Blood Type Compatibility Evaluator

Determines which donor blood types can donate to which recipient blood types.
Two policies are supported:

- FULL_CHART: standard ABO and Rhesus transfusion rules (primary)
- ABO_ONLY: ABO group rules only; a Rh+ donor to a Rh- recipient raises an
  advisory rhesus mismatch flag instead of excluding the pair

Lookups never raise: an unknown or absent blood type is simply incompatible.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .data_models import AboGroup, BloodType, Rhesus


logger = logging.getLogger(__name__)

BloodTypeLike = Union[BloodType, str, None]


class CompatibilityPolicy(Enum):
    """Blood-type compatibility rule set."""
    FULL_CHART = "full_chart"
    ABO_ONLY = "abo_only"


# Recipient blood type -> donor blood types it can receive
RECIPIENT_COMPATIBILITY = {
    'A+': ['A+', 'A-', 'O+', 'O-'],
    'A-': ['A-', 'O-'],
    'B+': ['B+', 'B-', 'O+', 'O-'],
    'B-': ['B-', 'O-'],
    'AB+': ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-'],  # Universal recipient
    'AB-': ['A-', 'B-', 'AB-', 'O-'],
    'O+': ['O+', 'O-'],
    'O-': ['O-'],
}

# Recipient ABO group -> donor ABO groups it can receive
ABO_COMPATIBILITY = {
    AboGroup.A: {AboGroup.A, AboGroup.O},
    AboGroup.B: {AboGroup.B, AboGroup.O},
    AboGroup.AB: {AboGroup.A, AboGroup.B, AboGroup.AB, AboGroup.O},
    AboGroup.O: {AboGroup.O},
}


@dataclass(frozen=True)
class CompatibilityVerdict:
    """Outcome of a donor/recipient blood type comparison."""
    compatible: bool
    exact_match: bool
    rhesus_mismatch: bool = False


def coerce_blood_type(value: BloodTypeLike) -> Optional[BloodType]:
    """
    Turn a BloodType or literal string into a BloodType.

    Returns None for absent or unparseable values.
    """
    if value is None or isinstance(value, BloodType):
        return value

    try:
        return BloodType.parse(value)
    except ValueError:
        logger.debug(f"Treating unrecognized blood type {value!r} as unknown")
        return None


def is_compatible(donor_type: BloodTypeLike, recipient_type: BloodTypeLike) -> bool:
    """
    Check full-chart compatibility of a donor blood type with a recipient.

    Args:
        donor_type: Donor's blood type (e.g. 'O-')
        recipient_type: Recipient's blood type (e.g. 'AB+')

    Returns:
        True if compatible, False otherwise (including unknown types)
    """
    donor = coerce_blood_type(donor_type)
    recipient = coerce_blood_type(recipient_type)
    if donor is None or recipient is None:
        return False

    return str(donor) in RECIPIENT_COMPATIBILITY[str(recipient)]


def is_exact_match(donor_type: BloodTypeLike, recipient_type: BloodTypeLike) -> bool:
    """Literal equality of two known blood types."""
    donor = coerce_blood_type(donor_type)
    recipient = coerce_blood_type(recipient_type)
    if donor is None or recipient is None:
        return False
    return donor == recipient


def is_abo_compatible(donor_type: BloodTypeLike, recipient_type: BloodTypeLike) -> bool:
    """ABO-only compatibility, ignoring the Rhesus sign."""
    donor = coerce_blood_type(donor_type)
    recipient = coerce_blood_type(recipient_type)
    if donor is None or recipient is None:
        return False

    return donor.abo in ABO_COMPATIBILITY[recipient.abo]


def has_rhesus_mismatch(donor_type: BloodTypeLike, recipient_type: BloodTypeLike) -> bool:
    """Advisory flag: Rh- recipient receiving from a Rh+ donor."""
    donor = coerce_blood_type(donor_type)
    recipient = coerce_blood_type(recipient_type)
    if donor is None or recipient is None:
        return False

    return recipient.rhesus is Rhesus.NEGATIVE and donor.rhesus is Rhesus.POSITIVE


def evaluate(donor_type: BloodTypeLike,
             recipient_type: BloodTypeLike,
             policy: CompatibilityPolicy = CompatibilityPolicy.FULL_CHART) -> CompatibilityVerdict:
    """Evaluate a donor/recipient blood type pair under the given policy."""
    if policy is CompatibilityPolicy.ABO_ONLY:
        compatible = is_abo_compatible(donor_type, recipient_type)
    else:
        compatible = is_compatible(donor_type, recipient_type)

    return CompatibilityVerdict(
        compatible=compatible,
        exact_match=is_exact_match(donor_type, recipient_type),
        rhesus_mismatch=has_rhesus_mismatch(donor_type, recipient_type)
    )


def get_compatible_donors(recipient_type: BloodTypeLike) -> List[str]:
    """
    Get list of blood types that can donate to a recipient.

    Args:
        recipient_type: Recipient's blood type

    Returns:
        List of compatible donor blood types (empty for unknown types)
    """
    recipient = coerce_blood_type(recipient_type)
    if recipient is None:
        return []
    return list(RECIPIENT_COMPATIBILITY[str(recipient)])


def get_compatible_recipients(donor_type: BloodTypeLike) -> List[str]:
    """
    Get list of blood types that can receive from a donor.

    Args:
        donor_type: Donor's blood type

    Returns:
        List of compatible recipient blood types (empty for unknown types)
    """
    donor = coerce_blood_type(donor_type)
    if donor is None:
        return []

    compatible_recipients = []
    for recipient, donors in RECIPIENT_COMPATIBILITY.items():
        if str(donor) in donors:
            compatible_recipients.append(recipient)

    return compatible_recipients
