from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from flagguess.dependencies import get_catalog
from flagguess.game.entities import EntityCatalog

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(catalog: EntityCatalog = Depends(get_catalog)):
    """Liveness probe; also reports how many countries are loaded."""
    return {
        "success": True,
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "countriesLoaded": catalog.count,
        "dataLoaded": catalog.loaded,
    }
