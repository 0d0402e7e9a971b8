import json
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from flourmix.api.api_run import app
from flourmix.api.dependencies import get_blend_repository, get_catalog_repository
from flourmix.events import web_observers
from flourmix.infra.Blend_Repository import BlendRepository
from flourmix.infra.Catalog_Repository import CatalogRepository
from flourmix.utilities.errors import DataAcquisitionError
from flourmix.utilities.export_import import blends_from_json

FLOURS = [
    {"id": "wheat", "name": "Wheat", "nutritional_values": {"proteins": 12, "carbs": 72},
     "protein_composition": {"albumins": 15, "globulins": 10, "prolamins": 40, "glutelins": 35},
     "mechanical_properties": {"binding": "high", "stickiness": "medium", "water_absorption": "medium"},
     "solubility": "medium"},
    {"id": "corn", "name": "Corn", "nutritional_values": {"proteins": 8, "carbs": 76},
     "protein_composition": {"albumins": 5, "globulins": 5, "prolamins": 50, "glutelins": 40},
     "anti_nutrients": {"phytic_acid": "high"},
     "mechanical_properties": {"binding": "low", "stickiness": "low", "water_absorption": "medium"},
     "solubility": "low"},
    {"id": "soy", "name": "Soy", "nutritional_values": {"proteins": 36, "carbs": 30},
     "protein_composition": {"globulins": 70, "glutelins": 30},
     "mechanical_properties": {"binding": "medium", "stickiness": "high", "water_absorption": "high"},
     "solubility": "high"},
]
ANTI_NUTRIENTS = [
    {"flour_id": "wheat", "contribution_anti_nutrientsyall": {"lectins": 0.2, "phytic_acid": 0.8},
     "anti_nutrients_total_contri": 1.0},
    {"flour_id": "soy", "contribution_anti_nutrientsyall": {"lectins": 6.0, "saponins": 7.0},
     "anti_nutrients_total_contri": 13.0},
]
ENZYMES = [{"flour_id": "wheat", "amylases": 2.0, "proteases": 1.0, "enzymes_total_contri": 3.0}]


def _composition(**percentages):
    return [{"flourId": k, "percentage": v} for k, v in percentages.items()]


class UnavailableCatalog(CatalogRepository):
    def get_materials(self, context):
        raise DataAcquisitionError("catalog offline")


class TestBlendsAPI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        web_observers.start()

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        data_dir = Path(self.tmp.name)
        for table, rows in (('flours', FLOURS), ('publiccontributionanti_nutrients', ANTI_NUTRIENTS),
                            ('publiccontributionenzymes', ENZYMES)):
            with open(data_dir / f"{table}.json", 'w', encoding='utf-8') as f:
                json.dump(rows, f)
        self.catalogs = CatalogRepository(data_dir)
        self.blends = BlendRepository(data_dir)
        app.dependency_overrides[get_catalog_repository] = lambda: self.catalogs
        app.dependency_overrides[get_blend_repository] = lambda: self.blends

    def tearDown(self):
        app.dependency_overrides.clear()
        self.tmp.cleanup()

    def _save(self, name, owner="user-1", **percentages):
        resp = self.client.post('/api/blends', json={
            "owner_id": owner, "name": name, "composition": _composition(**percentages)
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def test_list_materials(self):
        resp = self.client.get('/api/catalogs/public/materials')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['count'], 3)
        self.assertEqual([m['id'] for m in data['materials']], ["corn", "soy", "wheat"])

    def test_materials_catalog_errors(self):
        self.assertEqual(self.client.get('/api/catalogs/wholesale/materials').status_code, 400)
        self.assertEqual(self.client.get('/api/catalogs/private/materials').status_code, 400)

    def test_materials_csv_export(self):
        resp = self.client.get('/api/catalogs/public/materials/export.csv')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers['content-type'].startswith('text/csv'))
        self.assertIn('Wheat', resp.text)

    def test_catalog_unavailable_maps_to_503(self):
        app.dependency_overrides[get_catalog_repository] = lambda: UnavailableCatalog(Path(self.tmp.name))
        resp = self.client.get('/api/catalogs/public/materials')
        self.assertEqual(resp.status_code, 503)

    def test_validate(self):
        resp = self.client.post('/api/blends/validate', json={"composition": _composition(wheat=60, corn=39.95)})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()['ok'])
        resp = self.client.post('/api/blends/validate', json={"composition": _composition(wheat=60, corn=30)})
        self.assertFalse(resp.json()['ok'])
        self.assertAlmostEqual(resp.json()['total_percentage'], 90.0)

    def test_profile_of_unsaved_composition(self):
        resp = self.client.post('/api/blends/profile', json={
            "composition": _composition(wheat=50, soy=50), "catalog": "public"
        })
        self.assertEqual(resp.status_code, 200)
        profile = resp.json()
        self.assertAlmostEqual(profile['nutritional']['proteins'], 24.0)
        self.assertAlmostEqual(profile['anti_nutrients']['lectins'], 3.1)
        self.assertAlmostEqual(profile['anti_nutrients_total'], 7.0)
        self.assertEqual(profile['anti_nutrients_level'], 'medium')
        self.assertAlmostEqual(profile['enzymes']['amylases'], 1.0)
        self.assertEqual(profile['mechanical_properties']['binding'], 'high')
        self.assertTrue(profile['is_valid'])
        self.assertEqual(profile['nutritional_chart'][0], {"name": "Proteins", "value": 24.0})

    def test_duplicate_flours_rejected(self):
        resp = self.client.post('/api/blends/profile', json={
            "composition": [{"flourId": "wheat", "percentage": 50}, {"flourId": "wheat", "percentage": 50}]
        })
        self.assertEqual(resp.status_code, 422)

    def test_save_list_and_delete(self):
        saved = self._save("Rustic", wheat=70, corn=30)
        wheat = saved['composition'][0]
        self.assertEqual(wheat['flourName'], "Wheat")
        self.assertEqual(wheat['nutritionalValues']['proteins'], 12.0)
        self.assertIn('antiNutrientContribution', wheat)

        listed = self.client.get('/api/blends', params={"owner_id": "user-1"}).json()
        self.assertEqual(listed['count'], 1)
        self.assertEqual(self.client.get(f"/api/blends/{saved['id']}").json()['name'], "Rustic")

        resp = self.client.delete(f"/api/blends/{saved['id']}", params={"owner_id": "user-1"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(f"/api/blends/{saved['id']}").status_code, 404)

    def test_save_rejects_invalid_sum(self):
        resp = self.client.post('/api/blends', json={
            "owner_id": "user-1", "name": "Short", "composition": _composition(wheat=50, corn=40)
        })
        self.assertEqual(resp.status_code, 400)
        self.assertAlmostEqual(resp.json()['total_percentage'], 90.0)
        events = web_observers.get_events()['events']
        self.assertEqual(events[-1]['type'], 'blend.sum_invalid')

    def test_save_enforces_tier_limit(self):
        body = {"owner_id": "user-1", "composition": _composition(wheat=100), "tier": "pro"}
        for i in range(3):
            self.assertEqual(self.client.post('/api/blends', json={**body, "name": f"Mix {i}"}).status_code, 201)
        resp = self.client.post('/api/blends', json={**body, "name": "Mix 3"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()['limit'], 3)

    def test_edit_keeps_creation_date(self):
        saved = self._save("Rustic", wheat=70, corn=30)
        resp = self.client.post('/api/blends', json={
            "id": saved['id'], "owner_id": "user-1", "name": "Rustic v2",
            "composition": _composition(wheat=80, corn=20)
        })
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['created_at'], saved['created_at'])
        self.assertEqual(self.client.get('/api/blends').json()['count'], 1)

    def test_saved_blend_profile(self):
        saved = self._save("Protein", wheat=50, soy=50)
        resp = self.client.get(f"/api/blends/{saved['id']}/profile")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['name'], "Protein")
        self.assertAlmostEqual(resp.json()['profile']['anti_nutrients_total'], 7.0)

    def test_combine_saved_blends(self):
        bread = self._save("Bread", wheat=60, corn=40)
        protein = self._save("Protein", wheat=50, soy=50)
        resp = self.client.post('/api/blends/combine', json={"items": [
            {"blend_id": bread['id'], "weight": 1}, {"blend_id": protein['id'], "weight": 1}
        ]})
        self.assertEqual(resp.status_code, 200, resp.text)
        data = resp.json()
        self.assertEqual(data['name'], "Bread + Protein")
        percentages = {c['flourId']: c['percentage'] for c in data['composition']}
        self.assertAlmostEqual(percentages['wheat'], 55.0)
        self.assertAlmostEqual(percentages['soy'], 25.0)
        self.assertAlmostEqual(percentages['corn'], 20.0)
        self.assertTrue(data['profile']['is_valid'])
        self.assertAlmostEqual(sum(data['profile']['protein_composition'].values()), 100.0)
        events = web_observers.get_events()['events']
        self.assertEqual(events[-1]['type'], 'blend.combined')

    def test_combine_requires_blends(self):
        resp = self.client.post('/api/blends/combine', json={"items": []})
        self.assertEqual(resp.status_code, 400)

    def test_combine_unknown_blend(self):
        resp = self.client.post('/api/blends/combine', json={"items": [{"blend_id": "missing"}]})
        self.assertEqual(resp.status_code, 404)

    def test_pdf_report(self):
        saved = self._save("Rustic", wheat=70, corn=30)
        resp = self.client.get(f"/api/blends/{saved['id']}/pdf")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers['content-type'], 'application/pdf')
        self.assertTrue(resp.content.startswith(b'%PDF'))

    def test_blends_csv_export(self):
        self._save("Rustic", wheat=70, corn=30)
        resp = self.client.get('/api/blends/export.csv')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.text.startswith('id;user_id;name'))

    def test_blends_json_export_round_trips(self):
        self._save("Rustic", wheat=70, corn=30)
        self._save("Other", owner="user-2", wheat=50, corn=50)
        resp = self.client.get('/api/blends/export.json', params={"owner_id": "user-1"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers['content-type'], 'application/json')
        blends = blends_from_json(resp.text)
        self.assertEqual([b.name for b in blends], ["Rustic"])
        self.assertEqual(sum(c.percentage for c in blends[0].components), 100)

    def test_events_endpoint(self):
        self._save("Rustic", wheat=70, corn=30)
        data = self.client.get('/api/events').json()
        self.assertIn('next_cursor', data)
        self.assertEqual(data['events'][-1]['type'], 'blend.saved')
        self.assertEqual(self.client.get('/api/events', params={"since": data['next_cursor']}).json()['events'], [])


if __name__ == '__main__':
    unittest.main()
