import unittest
from flourmix.domain.Blend import Blend
from flourmix.domain.MixComponent import MixComponent
from flourmix.logic.reporting.profile import compute_profile


def _anti_snapshot(**values):
    return {"contribution_anti_nutrientsyall": values}


class TestBlendProfile(unittest.TestCase):

    def test_profile_shape(self):
        profile = compute_profile([MixComponent("wheat", percentage=100, nutritional_values={"proteins": 12})])
        for key in ('nutritional', 'protein_composition', 'enzymes', 'enzymes_total', 'anti_nutrients',
                    'anti_nutrients_total', 'anti_nutrients_level', 'mechanical_properties', 'solubility',
                    'total_percentage', 'is_valid'):
            self.assertIn(key, profile)
        self.assertTrue(profile['is_valid'])
        self.assertAlmostEqual(profile['nutritional']['proteins'], 12.0)

    def test_anti_nutrient_total_above_ten_is_high(self):
        component = MixComponent("soy", percentage=100,
                                 anti_nutrient_contribution=_anti_snapshot(lectins=7.0, saponins=5.0))
        profile = compute_profile([component])
        self.assertAlmostEqual(profile['anti_nutrients_total'], 12.0)
        self.assertEqual(profile['anti_nutrients_level'], 'high')

    def test_anti_nutrient_total_of_ten_is_medium(self):
        component = MixComponent("soy", percentage=100,
                                 anti_nutrient_contribution=_anti_snapshot(lectins=10.0))
        profile = compute_profile([component])
        self.assertEqual(profile['anti_nutrients_level'], 'medium')

    def test_enzyme_total_is_not_bucketed(self):
        component = MixComponent("wheat", percentage=50, enzyme_contribution={
            "contribution_enzymesyall": {"amylases": 30.0, "proteases": 10.0},
        })
        profile = compute_profile([component])
        self.assertAlmostEqual(profile['enzymes_total'], 20.0)
        self.assertFalse(profile['is_valid'])
        self.assertAlmostEqual(profile['total_percentage'], 50.0)

    def test_combined_flag_switches_protein_rule(self):
        components = Blend([
            MixComponent("soy", percentage=50, nutritional_values={"proteins": 30},
                         protein_composition={"globulins": 100}),
            MixComponent("rice", percentage=50, nutritional_values={"proteins": 10},
                         protein_composition={"albumins": 100}),
        ])
        plain = compute_profile(components)
        combined = compute_profile(components, combined=True)
        self.assertAlmostEqual(plain['protein_composition']['globulins'], 50.0)
        self.assertAlmostEqual(combined['protein_composition']['globulins'], 75.0)


if __name__ == '__main__':
    unittest.main()
