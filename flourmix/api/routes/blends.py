import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from flourmix.api.dependencies import get_blend_repository, get_catalog_repository
from flourmix.domain.Blend import SavedBlend
from flourmix.domain.MixComponent import MixComponent
from flourmix.events.event_helpers import publish_blend_combined
from flourmix.infra.Blend_Repository import BlendRepository
from flourmix.infra.Catalog_Repository import CatalogRepository
from flourmix.infra.pdf_utils import generate_pdf_for_blend
from flourmix.logic.combination.combiner import CombinationRequest, combine_blends, suggest_combined_name
from flourmix.logic.reporting.aggregators import to_chart_series
from flourmix.logic.reporting.profile import compute_profile
from flourmix.logic.validation.percentages import validate_percentages
from flourmix.utilities.export_import import blends_to_csv, blends_to_json
from flourmix.utilities.validators import BlendInput, CombineInput, CompositionInput

router = APIRouter(prefix='/api/blends', tags=['blends'])
logger = logging.getLogger(__name__)

NUTRIENT_LABELS = {
    'proteins': 'Proteins',
    'lipids': 'Lipids',
    'carbs': 'Carbohydrates',
    'fiber': 'Fiber',
    'moisture': 'Moisture',
    'ash': 'Ash',
}


def _profile_for(components: List[MixComponent], repo: CatalogRepository,
                 owner_id: Optional[str] = None, combined: bool = False) -> dict:
    materials, anti_nutrients, enzymes = repo.load_for_components(components, owner_id)
    profile = compute_profile(components, materials, anti_nutrients, enzymes, combined=combined)
    profile['nutritional_chart'] = to_chart_series(profile['nutritional'], NUTRIENT_LABELS)
    return profile


def _with_snapshots(components: List[MixComponent], repo: CatalogRepository,
                    owner_id: Optional[str]) -> List[MixComponent]:
    """Fill in catalog snapshots for components saved without them."""
    materials, anti_nutrients, enzymes = repo.load_for_components(components, owner_id)
    result = []
    for c in components:
        material = materials.get(c.material_id)
        if material is None or c.nutritional_values:
            result.append(c)
            continue
        filled = MixComponent.from_material(material, c.percentage,
                                            anti_nutrients.get(c.material_id), enzymes.get(c.material_id))
        filled.source = c.source
        result.append(filled)
    return result


@router.post('/validate')
def validate_blend(payload: CompositionInput):
    components = [c.to_component(payload.catalog) for c in payload.composition]
    check = validate_percentages(components)
    return {'ok': check.ok, 'total_percentage': check.total_percentage}


@router.post('/profile')
def profile_composition(payload: CompositionInput,
                        repo: CatalogRepository = Depends(get_catalog_repository)):
    """Aggregated profile of an unsaved composition in the given catalog."""
    components = [c.to_component(payload.catalog) for c in payload.composition]
    return _profile_for(components, repo, payload.owner_id)


@router.get('')
def list_blends(owner_id: Optional[str] = Query(default=None),
                repo: BlendRepository = Depends(get_blend_repository)):
    blends = repo.list_blends(owner_id)
    return {'count': len(blends), 'blends': [b.to_dict() for b in blends]}


@router.get('/shared')
def list_shared_blends(repo: BlendRepository = Depends(get_blend_repository)):
    blends = repo.list_shared()
    return {'count': len(blends), 'blends': [b.to_dict() for b in blends]}


@router.get('/export.csv')
def export_blends(owner_id: Optional[str] = Query(default=None),
                  repo: BlendRepository = Depends(get_blend_repository)):
    return Response(
        content=blends_to_csv(repo.list_blends(owner_id)),
        media_type='text/csv',
        headers={'Content-Disposition': 'attachment; filename=saved_mixes.csv'},
    )


@router.get('/export.json')
def export_blends_json(owner_id: Optional[str] = Query(default=None),
                       repo: BlendRepository = Depends(get_blend_repository)):
    return Response(
        content=blends_to_json(repo.list_blends(owner_id)),
        media_type='application/json',
        headers={'Content-Disposition': 'attachment; filename=saved_mixes.json'},
    )


@router.post('', status_code=201)
def save_blend(payload: BlendInput,
               blends: BlendRepository = Depends(get_blend_repository),
               catalogs: CatalogRepository = Depends(get_catalog_repository)):
    """Create or update a saved blend.

    Rejected with 400 when the percentages do not sum to 100 and with 403
    when the owner's tier limit is reached.
    """
    components = _with_snapshots([c.to_component() for c in payload.composition], catalogs, payload.owner_id)
    blend = SavedBlend(
        id=payload.id or '',
        owner_id=payload.owner_id,
        name=payload.name,
        components=components,
        description=payload.description,
        tags=payload.tags,
        shared=payload.shared,
    )
    if payload.id:
        try:
            blend.created_at = blends.get_blend(payload.id).created_at
        except KeyError:
            logger.info(f"Blend id {payload.id} not found; saving as a new blend")
    saved = blends.save_blend(blend, tier=payload.tier, bonus_slots=payload.bonus_slots)
    return saved.to_dict()


@router.post('/combine')
def combine(payload: CombineInput,
            blends: BlendRepository = Depends(get_blend_repository),
            catalogs: CatalogRepository = Depends(get_catalog_repository)):
    """Combine saved blends with weights into a new, unsaved composition."""
    sources = [(blends.get_blend(item.blend_id), item.weight) for item in payload.items]
    combined = combine_blends([CombinationRequest(blend, weight) for blend, weight in sources])
    publish_blend_combined([b.id for b, _ in sources], [w for _, w in sources], len(combined))
    components = list(combined.components)
    return {
        'name': suggest_combined_name([b.name for b, _ in sources]),
        'composition': combined.to_dict(),
        'profile': _profile_for(components, catalogs, payload.owner_id, combined=True),
    }


@router.get('/{blend_id}')
def get_blend(blend_id: str, repo: BlendRepository = Depends(get_blend_repository)):
    return repo.get_blend(blend_id).to_dict()


@router.delete('/{blend_id}')
def delete_blend(blend_id: str,
                 owner_id: Optional[str] = Query(default=None),
                 repo: BlendRepository = Depends(get_blend_repository)):
    repo.delete_blend(blend_id, owner_id)
    return {'message': 'Blend deleted', 'id': blend_id}


@router.get('/{blend_id}/profile')
def saved_blend_profile(blend_id: str,
                        blends: BlendRepository = Depends(get_blend_repository),
                        catalogs: CatalogRepository = Depends(get_catalog_repository)):
    blend = blends.get_blend(blend_id)
    return {'id': blend.id, 'name': blend.name,
            'profile': _profile_for(list(blend.components), catalogs, blend.owner_id)}


@router.get('/{blend_id}/pdf')
def saved_blend_pdf(blend_id: str,
                    blends: BlendRepository = Depends(get_blend_repository),
                    catalogs: CatalogRepository = Depends(get_catalog_repository)):
    blend = blends.get_blend(blend_id)
    profile = _profile_for(list(blend.components), catalogs, blend.owner_id)
    pdf_bytes = generate_pdf_for_blend(blend.name, blend.components, profile)
    return Response(
        content=pdf_bytes,
        media_type='application/pdf',
        headers={'Content-Disposition': f'attachment; filename=blend_{blend.id}.pdf'},
    )
