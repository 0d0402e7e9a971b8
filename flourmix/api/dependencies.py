"""Repository providers for the API routers (overridable in tests via app.dependency_overrides)."""
from flourmix.infra.Blend_Repository import BlendRepository
from flourmix.infra.Catalog_Repository import CatalogRepository


def get_catalog_repository() -> CatalogRepository:
    return CatalogRepository()


def get_blend_repository() -> BlendRepository:
    return BlendRepository()
