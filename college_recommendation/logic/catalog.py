"""
Institution Catalog

Read-only access to institution records, filterable by region and type.
"""

import logging
from typing import Iterable, List, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .adapter import transform_colleges
from .contracts import CatalogFilter, Institution
from .errors import CatalogUnavailableError

logger = logging.getLogger(__name__)


class InstitutionCatalog(Protocol):
    def query(self, filter: Optional[CatalogFilter] = None) -> List[Institution]:
        ...


def _matches(institution: Institution, filter: CatalogFilter) -> bool:
    if filter.regions:
        regions = {r.lower() for r in filter.regions}
        if institution.region.lower() not in regions:
            return False
    if filter.institution_types and institution.institution_type not in filter.institution_types:
        return False
    return True


class InMemoryInstitutionCatalog:
    """Catalog over a fixed list of institutions (tests, offline demos)."""

    def __init__(self, institutions: Iterable[Institution]):
        self._institutions = list(institutions)

    def query(self, filter: Optional[CatalogFilter] = None) -> List[Institution]:
        if filter is None:
            return list(self._institutions)
        return [i for i in self._institutions if _matches(i, filter)]


class SqlInstitutionCatalog:
    """Catalog backed by the rec_colleges table."""

    def __init__(self, db: Session):
        self.db = db

    def query(self, filter: Optional[CatalogFilter] = None) -> List[Institution]:
        from ..models import RecCollege

        try:
            query = self.db.query(RecCollege)
            if filter and filter.regions:
                query = query.filter(func.lower(RecCollege.state).in_([r.lower() for r in filter.regions]))
            rows = query.order_by(RecCollege.id).all()
        except SQLAlchemyError as e:
            logger.error(f"❌ Catalog query failed: {e}")
            raise CatalogUnavailableError(f"Institution catalog unavailable: {e}") from e

        institutions = transform_colleges(rows)
        if filter and filter.institution_types:
            # type labels are normalized in the adapter, so filter after transform
            institutions = [i for i in institutions if i.institution_type in filter.institution_types]

        logger.info(f"📚 Catalog returned {len(institutions)} institutions ({len(rows)} rows)")
        return institutions
