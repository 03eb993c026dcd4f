"""
Tests for the Predicted Heart Mass calculator.
"""

import math
import unittest

from heart_transplant_matcher.core.data_models import BiometricProfile, Gender
from heart_transplant_matcher.core.exceptions import InvalidInput
from heart_transplant_matcher.core.phm_calculator import (
    compute_phm,
    left_ventricular_mass,
    normalize_height,
    phm_ratio,
    right_ventricular_mass
)


class TestNormalizeHeight(unittest.TestCase):
    """Test the centimeter/meter disambiguation rule."""

    def test_centimeters_converted(self):
        self.assertEqual(normalize_height(180), 1.8)
        self.assertEqual(normalize_height(3.5), 0.035)

    def test_meters_kept(self):
        self.assertEqual(normalize_height(1.8), 1.8)
        self.assertEqual(normalize_height(3), 3)


class TestComputePHM(unittest.TestCase):
    """Test the PHM formula and its input validation."""

    def setUp(self):
        self.male_donor = BiometricProfile(gender="male", age=45, height=180, weight=80)
        self.female_recipient = BiometricProfile(gender="female", age=50, height=165, weight=65)

    def test_male_reference_value(self):
        """Male donor, 45 years, 180 cm, 80 kg."""
        expected_lvm = 8.25 * 1.8 ** 0.54 * 80 ** 0.61
        expected_rvm = 11.25 * 45 ** -0.32 * 1.8 ** 1.135 * 80 ** 0.315

        phm = compute_phm(self.male_donor)

        self.assertAlmostEqual(phm, expected_lvm + expected_rvm, places=9)
        self.assertGreater(phm, 185)
        self.assertLess(phm, 195)

    def test_female_reference_value(self):
        """Female recipient, 50 years, 165 cm, 65 kg."""
        expected_lvm = 6.82 * 1.65 ** 0.54 * 65 ** 0.61
        expected_rvm = 10.59 * 50 ** -0.32 * 1.65 ** 1.135 * 65 ** 0.315

        phm = compute_phm(self.female_recipient)

        self.assertAlmostEqual(phm, expected_lvm + expected_rvm, places=9)
        self.assertGreater(phm, 130)
        self.assertLess(phm, 138)

    def test_phm_is_sum_of_ventricular_masses(self):
        lvm = left_ventricular_mass(Gender.MALE, 1.8, 80)
        rvm = right_ventricular_mass(Gender.MALE, 45, 1.8, 80)
        self.assertEqual(compute_phm(self.male_donor), lvm + rvm)

    def test_height_in_meters_equals_centimeters(self):
        in_meters = BiometricProfile(gender="male", age=45, height=1.8, weight=80)
        self.assertEqual(compute_phm(in_meters), compute_phm(self.male_donor))

    def test_gender_case_insensitive(self):
        upper = BiometricProfile(gender="MALE", age=45, height=180, weight=80)
        enum = BiometricProfile(gender=Gender.MALE, age=45, height=180, weight=80)
        self.assertEqual(compute_phm(upper), compute_phm(self.male_donor))
        self.assertEqual(compute_phm(enum), compute_phm(self.male_donor))

    def test_female_coefficients_differ(self):
        female = BiometricProfile(gender="female", age=45, height=180, weight=80)
        self.assertLess(compute_phm(female), compute_phm(self.male_donor))

    def test_strictly_positive_and_increasing_in_weight(self):
        previous = 0.0
        for weight in [20, 40, 60, 80, 100, 140]:
            phm = compute_phm(BiometricProfile(gender="female", age=30, height=170, weight=weight))
            self.assertGreater(phm, 0)
            self.assertGreater(phm, previous)
            previous = phm

    def test_no_rounding_applied(self):
        phm = compute_phm(self.male_donor)
        self.assertNotEqual(phm, round(phm, 2))

    def test_unrecognized_gender(self):
        profile = BiometricProfile(gender="other", age=45, height=180, weight=80)
        with self.assertRaises(InvalidInput) as ctx:
            compute_phm(profile)
        self.assertEqual(ctx.exception.field, "gender")

    def test_missing_gender(self):
        profile = BiometricProfile(gender=None, age=45, height=180, weight=80)
        with self.assertRaises(InvalidInput):
            compute_phm(profile)

    def test_zero_age_rejected(self):
        profile = BiometricProfile(gender="male", age=0, height=180, weight=80)
        with self.assertRaises(InvalidInput) as ctx:
            compute_phm(profile)
        self.assertEqual(ctx.exception.field, "age")

    def test_non_positive_values_rejected(self):
        cases = [
            ("height", BiometricProfile(gender="male", age=45, height=0, weight=80)),
            ("height", BiometricProfile(gender="male", age=45, height=-170, weight=80)),
            ("weight", BiometricProfile(gender="male", age=45, height=180, weight=-1)),
            ("age", BiometricProfile(gender="male", age=-3, height=180, weight=80)),
        ]
        for field_name, profile in cases:
            with self.subTest(profile=profile):
                with self.assertRaises(InvalidInput) as ctx:
                    compute_phm(profile)
                self.assertEqual(ctx.exception.field, field_name)

    def test_non_numeric_values_rejected(self):
        cases = [
            BiometricProfile(gender="male", age="45", height=180, weight=80),
            BiometricProfile(gender="male", age=45, height=None, weight=80),
            BiometricProfile(gender="male", age=45, height=180, weight=True),
            BiometricProfile(gender="male", age=45, height=180, weight=math.nan),
            BiometricProfile(gender="male", age=math.inf, height=180, weight=80),
        ]
        for profile in cases:
            with self.subTest(profile=profile):
                with self.assertRaises(InvalidInput):
                    compute_phm(profile)


class TestPHMRatio(unittest.TestCase):
    """Test the donor/recipient ratio."""

    def test_ratio_of_identical_profiles_is_one(self):
        profile = BiometricProfile(gender="female", age=30, height=160, weight=55)
        phm = compute_phm(profile)
        self.assertEqual(phm_ratio(phm, phm), 1.0)

    def test_swapping_donor_and_recipient_inverts_ratio(self):
        a = compute_phm(BiometricProfile(gender="male", age=45, height=180, weight=80))
        b = compute_phm(BiometricProfile(gender="female", age=50, height=165, weight=65))

        self.assertAlmostEqual(phm_ratio(a, b), 1 / phm_ratio(b, a), places=12)

    def test_reference_pair_ratio(self):
        a = compute_phm(BiometricProfile(gender="male", age=45, height=180, weight=80))
        b = compute_phm(BiometricProfile(gender="female", age=50, height=165, weight=65))

        ratio = phm_ratio(a, b)
        self.assertEqual(ratio, a / b)
        self.assertGreater(ratio, 1.221)


if __name__ == '__main__':
    unittest.main()
