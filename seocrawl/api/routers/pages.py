import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from seocrawl.exceptions import PageStoreError

logger = logging.getLogger(__name__)


def create_pages_router(pages_repo):
    router = APIRouter(prefix="/pages", tags=["Pages"])

    @router.get("/{page_id}")
    def get_page(page_id: int, include_markup: Optional[bool] = None):
        include = bool(include_markup)
        try:
            p = pages_repo.get_page(page_id, full=include)
        except PageStoreError:
            logger.exception("Could not load page %s", page_id)
            return JSONResponse(
                status_code=500,
                content={"error": "Page store error", "details": "could not load page"},
            )
        if not p:
            raise HTTPException(status_code=404, detail="page not found")
        return p.to_dict(include_markup=include)

    return router
