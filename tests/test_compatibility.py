"""
Tests for blood type compatibility under both policies.
"""

import unittest

from heart_transplant_matcher.core.compatibility import (
    CompatibilityPolicy,
    RECIPIENT_COMPATIBILITY,
    coerce_blood_type,
    evaluate,
    get_compatible_donors,
    get_compatible_recipients,
    has_rhesus_mismatch,
    is_abo_compatible,
    is_compatible,
    is_exact_match
)
from heart_transplant_matcher.core.data_models import AboGroup, BloodType, Rhesus

ALL_TYPES = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']


def _abo_subset(donor_abo: str, recipient_abo: str) -> bool:
    return donor_abo == 'O' or recipient_abo == 'AB' or donor_abo == recipient_abo


class TestBloodTypeParsing(unittest.TestCase):
    """Test BloodType value parsing."""

    def test_parse_all_literals(self):
        for literal in ALL_TYPES:
            with self.subTest(literal=literal):
                self.assertEqual(str(BloodType.parse(literal)), literal)

    def test_parse_components(self):
        blood_type = BloodType.parse("ab-")
        self.assertEqual(blood_type.abo, AboGroup.AB)
        self.assertEqual(blood_type.rhesus, Rhesus.NEGATIVE)

    def test_unicode_minus(self):
        self.assertEqual(BloodType.parse("O−"), BloodType.parse("O-"))

    def test_invalid_literals(self):
        for literal in ["", "O", "C+", "ABO+", "A*", "+"]:
            with self.subTest(literal=literal):
                with self.assertRaises(ValueError):
                    BloodType.parse(literal)

    def test_coerce_never_raises(self):
        self.assertIsNone(coerce_blood_type(None))
        self.assertIsNone(coerce_blood_type("unknown"))
        self.assertEqual(coerce_blood_type("A+"), BloodType(AboGroup.A, Rhesus.POSITIVE))


class TestFullChartCompatibility(unittest.TestCase):
    """Test the primary (full chart) policy."""

    def test_o_negative_universal_donor(self):
        for recipient in ALL_TYPES:
            with self.subTest(recipient=recipient):
                self.assertTrue(is_compatible('O-', recipient))

    def test_ab_positive_universal_recipient(self):
        for donor in ALL_TYPES:
            with self.subTest(donor=donor):
                self.assertTrue(is_compatible(donor, 'AB+'))

    def test_chart_follows_transfusion_rule(self):
        for donor in ALL_TYPES:
            for recipient in ALL_TYPES:
                expected = (_abo_subset(donor[:-1], recipient[:-1])
                            and (donor[-1] == '-' or recipient[-1] == '+'))
                with self.subTest(donor=donor, recipient=recipient):
                    self.assertEqual(is_compatible(donor, recipient), expected)

    def test_chart_has_all_eight_recipients(self):
        self.assertEqual(sorted(RECIPIENT_COMPATIBILITY), sorted(ALL_TYPES))

    def test_specific_pairs(self):
        self.assertTrue(is_compatible('A-', 'A+'))
        self.assertFalse(is_compatible('A+', 'A-'))
        self.assertFalse(is_compatible('B+', 'A+'))
        self.assertFalse(is_compatible('AB-', 'O-'))

    def test_unknown_types_are_incompatible(self):
        self.assertFalse(is_compatible(None, 'A+'))
        self.assertFalse(is_compatible('A+', None))
        self.assertFalse(is_compatible('', 'A+'))
        self.assertFalse(is_compatible('X+', 'AB+'))

    def test_accepts_blood_type_values(self):
        self.assertTrue(is_compatible(BloodType.parse('O-'), BloodType.parse('AB+')))

    def test_exact_match(self):
        self.assertTrue(is_exact_match('O-', 'O-'))
        self.assertTrue(is_exact_match(BloodType.parse('AB+'), 'AB+'))
        self.assertFalse(is_exact_match('O-', 'AB+'))
        self.assertFalse(is_exact_match(None, None))

    def test_compatible_donor_and_recipient_lists(self):
        self.assertEqual(sorted(get_compatible_donors('O+')), ['O+', 'O-'])
        self.assertEqual(sorted(get_compatible_recipients('AB+')), ['AB+'])
        self.assertEqual(sorted(get_compatible_recipients('O-')), sorted(ALL_TYPES))
        self.assertEqual(get_compatible_donors(None), [])
        self.assertEqual(get_compatible_recipients('bogus'), [])


class TestAboOnlyCompatibility(unittest.TestCase):
    """Test the alternate ABO-only policy."""

    def test_abo_rules(self):
        for donor in ALL_TYPES:
            for recipient in ALL_TYPES:
                with self.subTest(donor=donor, recipient=recipient):
                    self.assertEqual(
                        is_abo_compatible(donor, recipient),
                        _abo_subset(donor[:-1], recipient[:-1])
                    )

    def test_rhesus_ignored_for_verdict(self):
        self.assertTrue(is_abo_compatible('A+', 'A-'))
        self.assertFalse(is_compatible('A+', 'A-'))

    def test_rhesus_mismatch_flag(self):
        self.assertTrue(has_rhesus_mismatch('O+', 'A-'))
        self.assertFalse(has_rhesus_mismatch('O-', 'A+'))
        self.assertFalse(has_rhesus_mismatch('O+', 'A+'))
        self.assertFalse(has_rhesus_mismatch(None, 'A-'))

    def test_evaluate_abo_only_is_advisory(self):
        verdict = evaluate('A+', 'A-', CompatibilityPolicy.ABO_ONLY)
        self.assertTrue(verdict.compatible)
        self.assertFalse(verdict.exact_match)
        self.assertTrue(verdict.rhesus_mismatch)

    def test_evaluate_full_chart_default(self):
        verdict = evaluate('A+', 'A-')
        self.assertFalse(verdict.compatible)
        self.assertTrue(verdict.rhesus_mismatch)

        verdict = evaluate('O-', 'AB+')
        self.assertTrue(verdict.compatible)
        self.assertFalse(verdict.exact_match)

    def test_evaluate_unknown(self):
        for policy in CompatibilityPolicy:
            with self.subTest(policy=policy):
                verdict = evaluate(None, 'A+', policy)
                self.assertFalse(verdict.compatible)
                self.assertFalse(verdict.exact_match)
                self.assertFalse(verdict.rhesus_mismatch)


if __name__ == '__main__':
    unittest.main()
