import logging
import unittest
from flourmix.domain.Blend import Blend
from flourmix.domain.MixComponent import MixComponent
from flourmix.logic.combination.combiner import (
    CombinationRequest, clamp_weight, combine_blends, suggest_combined_name
)
from flourmix.utilities.errors import EmptyCombinationError


def _percentages(blend):
    return {c.material_id: c.percentage for c in blend.components}


class TestCombiner(unittest.TestCase):

    def setUp(self):
        self.bread = Blend([MixComponent("wheat", "Wheat", 60), MixComponent("corn", "Corn", 40)])
        self.protein = Blend([MixComponent("wheat", "Wheat", 50), MixComponent("soy", "Soy", 50)])

    def test_equal_weights(self):
        result = combine_blends([CombinationRequest(self.bread, 1), CombinationRequest(self.protein, 1)])
        percentages = _percentages(result)
        self.assertAlmostEqual(percentages["wheat"], 55.0)
        self.assertAlmostEqual(percentages["soy"], 25.0)
        self.assertAlmostEqual(percentages["corn"], 20.0)
        self.assertEqual([c.material_id for c in result.components], ["wheat", "soy", "corn"])

    def test_wheat_corn_soy_scenario(self):
        soy_heavy = Blend([MixComponent("wheat", percentage=20), MixComponent("soy", percentage=80)])
        result = combine_blends([CombinationRequest(self.bread, 1), CombinationRequest(soy_heavy, 1)])
        percentages = _percentages(result)
        self.assertAlmostEqual(percentages["wheat"], 40.0)
        self.assertAlmostEqual(percentages["corn"], 20.0)
        self.assertAlmostEqual(percentages["soy"], 40.0)
        self.assertAlmostEqual(result.total_percentage, 100.0)
        self.assertEqual([c.material_id for c in result.components], ["wheat", "soy", "corn"])

    def test_unequal_weights(self):
        result = combine_blends([CombinationRequest(self.bread, 3), CombinationRequest(self.protein, 1)])
        percentages = _percentages(result)
        self.assertAlmostEqual(percentages["wheat"], 57.5)
        self.assertAlmostEqual(percentages["corn"], 30.0)
        self.assertAlmostEqual(percentages["soy"], 12.5)
        self.assertAlmostEqual(result.total_percentage, 100.0)

    def test_single_blend_is_unchanged(self):
        result = combine_blends([CombinationRequest(self.bread, 2.5)])
        self.assertEqual(_percentages(result), {"wheat": 60.0, "corn": 40.0})

    def test_order_of_requests_does_not_matter(self):
        a = combine_blends([CombinationRequest(self.bread, 2), CombinationRequest(self.protein, 1)])
        b = combine_blends([CombinationRequest(self.protein, 1), CombinationRequest(self.bread, 2)])
        for material_id, percentage in _percentages(a).items():
            self.assertAlmostEqual(percentage, _percentages(b)[material_id])

    def test_result_is_renormalized(self):
        short = Blend([MixComponent("wheat", percentage=50), MixComponent("rice", percentage=40)])
        result = combine_blends([CombinationRequest(short, 1), CombinationRequest(self.protein, 1)])
        self.assertAlmostEqual(result.total_percentage, 100.0)
        self.assertAlmostEqual(_percentages(result)["rice"], 20.0 / 95.0 * 100)

    def test_inputs_are_not_mutated(self):
        combine_blends([CombinationRequest(self.bread, 1), CombinationRequest(self.protein, 4)])
        self.assertEqual(_percentages(self.bread), {"wheat": 60.0, "corn": 40.0})

    def test_ties_keep_first_seen_order(self):
        blend = Blend([MixComponent("b", percentage=50), MixComponent("a", percentage=50)])
        result = combine_blends([CombinationRequest(blend)])
        self.assertEqual([c.material_id for c in result.components], ["b", "a"])

    def test_empty_request_raises(self):
        with self.assertRaises(EmptyCombinationError):
            combine_blends([])
        self.assertTrue(issubclass(EmptyCombinationError, ValueError))

    def test_non_positive_weight_raises(self):
        with self.assertRaises(ValueError):
            combine_blends([CombinationRequest(self.bread, 0)])

    def test_non_finite_weight_raises(self):
        for weight in (float("nan"), float("inf")):
            with self.assertRaises(ValueError):
                combine_blends([CombinationRequest(self.bread, weight)])
            with self.assertRaises(ValueError):
                combine_blends([CombinationRequest(self.bread, 1), CombinationRequest(self.protein, weight)])

    def test_snapshots_scaled_by_raw_weight(self):
        first = Blend([MixComponent("soy", percentage=100, anti_nutrient_contribution={
            "lectins": 1.0, "anti_nutrients_total_contri": 2.0})])
        second = Blend([MixComponent("soy", percentage=100, anti_nutrient_contribution={
            "contribution_anti_nutrientsyall": {"lectins": 3.0}, "lectins": 99.0})])
        result = combine_blends([CombinationRequest(first, 2), CombinationRequest(second, 1)])
        snapshot = result.get_component("soy").anti_nutrient_contribution
        self.assertAlmostEqual(snapshot["lectins"], 1.0 * 2 + 3.0 * 1)
        self.assertAlmostEqual(snapshot["anti_nutrients_total_contri"], 4.0)
        self.assertAlmostEqual(result.get_component("soy").percentage, 100.0)

    def test_snapshot_merged_only_when_both_sides_have_one(self):
        bare = Blend([MixComponent("soy", percentage=100)])
        carrying = Blend([MixComponent("soy", percentage=100, enzyme_contribution={"lipases": 3.0})])
        result = combine_blends([CombinationRequest(bare, 1), CombinationRequest(carrying, 1)])
        self.assertIsNone(result.get_component("soy").enzyme_contribution)

    def test_catalog_tag_last_write_wins(self):
        public = Blend([MixComponent("wheat", percentage=100, source="public")])
        private = Blend([MixComponent("wheat", percentage=100, source="private")])
        with self.assertLogs("flourmix.logic.combination.combiner", level=logging.WARNING):
            result = combine_blends([CombinationRequest(public), CombinationRequest(private)])
        self.assertEqual(result.get_component("wheat").source, "private")
        self.assertEqual(len(result), 1)

    def test_zero_total_skips_rescaling(self):
        empty = Blend([MixComponent("wheat", percentage=0)])
        result = combine_blends([CombinationRequest(empty)])
        self.assertEqual(result.get_component("wheat").percentage, 0.0)

    def test_clamp_weight(self):
        self.assertEqual(clamp_weight(None), 1.0)
        self.assertEqual(clamp_weight(0), 0.1)
        self.assertEqual(clamp_weight(25), 10.0)
        self.assertEqual(clamp_weight(2.5), 2.5)

    def test_suggested_name(self):
        self.assertEqual(suggest_combined_name(["Bread"]), "Bread")
        self.assertEqual(suggest_combined_name(["Bread", "Protein"]), "Bread + Protein")
        self.assertEqual(suggest_combined_name(["A", "B", "C"]), "Combined Mix (3 mixes)")


if __name__ == '__main__':
    unittest.main()
