import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Body

from app.core.data_store import get_data_store

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------
# POST /api/slices  (upload handoff)
# ---------------------------------------------------------
@router.post("/slices")
async def store_slices(body: Any = Body(...)) -> Dict[str, Any]:
    """
    Stores an uploaded backlog for a short time and returns the token the
    forecast page uses to read it back.
    """
    try:
        data_id = get_data_store().put(body)
        return {
            "success": True,
            "dataId": data_id,
            "url": f"/?id={data_id}",
        }
    except Exception as e:
        logger.exception("[STORE] Failed to store uploaded backlog")
        raise HTTPException(
            status_code=500,
            detail=str(e),
            headers={"X-Failure-Reason": "Handoff store error"},
        )


@router.get("/slices")
async def slices_info() -> Dict[str, str]:
    return {"message": "GET method supported"}


# ---------------------------------------------------------
# GET /api/data/{data_id}
# ---------------------------------------------------------
@router.get("/data/{data_id}")
async def fetch_stored_data(data_id: str) -> Any:
    data = get_data_store().get(data_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Data not found or expired")
    return data
