"""
Predicted Heart Mass (PHM) calculator.

Implements the anthropometric regression from Kransdorf et al. (2019),
"Predicted heart mass is the optimal metric for size match in heart
transplantation". PHM is the sum of the predicted left- and right-ventricular
masses, in grams.
"""

import math
from numbers import Real

from .data_models import BiometricProfile, Gender
from .exceptions import InvalidInput


# Heights above this value are taken to be centimeters
HEIGHT_UNIT_THRESHOLD = 3

LVM_COEFFICIENTS = {
    Gender.FEMALE: 6.82,
    Gender.MALE: 8.25,
}

RVM_COEFFICIENTS = {
    Gender.FEMALE: 10.59,
    Gender.MALE: 11.25,
}


def normalize_height(height: float) -> float:
    """Return height in meters, converting from centimeters when height > 3."""
    if height > HEIGHT_UNIT_THRESHOLD:
        return height / 100
    return height


def _require_positive(value, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{field_name} must be a number, got {value!r}", field=field_name)
    if not math.isfinite(value):
        raise InvalidInput(f"{field_name} must be finite, got {value!r}", field=field_name)
    if value <= 0:
        raise InvalidInput(f"{field_name} must be positive, got {value!r}", field=field_name)
    return float(value)


def _resolve_gender(value) -> Gender:
    try:
        return Gender.parse(value)
    except ValueError:
        raise InvalidInput(f"Unrecognized gender: {value!r}", field="gender") from None


def left_ventricular_mass(gender: Gender, height_m: float, weight_kg: float) -> float:
    """LVM = Clvm(gender) * height^0.54 * weight^0.61"""
    return LVM_COEFFICIENTS[gender] * height_m ** 0.54 * weight_kg ** 0.61


def right_ventricular_mass(gender: Gender, age: float, height_m: float, weight_kg: float) -> float:
    """RVM = Crvm(gender) * age^-0.32 * height^1.135 * weight^0.315"""
    return (RVM_COEFFICIENTS[gender] * age ** -0.32
            * height_m ** 1.135 * weight_kg ** 0.315)


def compute_phm(profile: BiometricProfile) -> float:
    """
    Calculate predicted heart mass in grams.

    Args:
        profile: Biometric profile (gender, age in years, height in cm or m,
            weight in kg)

    Returns:
        Predicted heart mass, unrounded

    Raises:
        InvalidInput: if gender is unrecognized or age, height or weight is
            missing, non-numeric or not strictly positive
    """
    gender = _resolve_gender(profile.gender)
    age = _require_positive(profile.age, "age")
    height = _require_positive(profile.height, "height")
    weight = _require_positive(profile.weight, "weight")

    height_m = normalize_height(height)

    lvm = left_ventricular_mass(gender, height_m, weight)
    rvm = right_ventricular_mass(gender, age, height_m, weight)

    return lvm + rvm


def phm_ratio(donor_phm: float, recipient_phm: float) -> float:
    """Donor-to-recipient PHM ratio; 1.0 is an ideal size match."""
    return donor_phm / recipient_phm
