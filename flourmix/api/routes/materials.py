from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from flourmix.api.dependencies import get_catalog_repository
from flourmix.domain.Catalog import CatalogContext
from flourmix.infra.Catalog_Repository import CatalogRepository
from flourmix.utilities.export_import import materials_to_csv

router = APIRouter(prefix='/api/catalogs', tags=['catalogs'])


def _context(catalog: str, owner_id: Optional[str]) -> CatalogContext:
    if catalog == 'private' and not owner_id:
        raise HTTPException(status_code=400, detail='The private catalog requires an owner_id')
    try:
        return CatalogContext(catalog, owner_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get('/{catalog}/materials')
def list_materials(catalog: str,
                   owner_id: Optional[str] = Query(default=None),
                   repo: CatalogRepository = Depends(get_catalog_repository)):
    """Materials of a catalog, sorted by name."""
    materials = repo.get_materials(_context(catalog, owner_id))
    return {'catalog': catalog, 'count': len(materials), 'materials': [m.to_dict() for m in materials]}


@router.get('/{catalog}/materials/export.csv')
def export_materials(catalog: str,
                     owner_id: Optional[str] = Query(default=None),
                     repo: CatalogRepository = Depends(get_catalog_repository)):
    materials = repo.get_materials(_context(catalog, owner_id))
    return Response(
        content=materials_to_csv(materials),
        media_type='text/csv',
        headers={'Content-Disposition': f'attachment; filename=flours_{catalog}.csv'},
    )
