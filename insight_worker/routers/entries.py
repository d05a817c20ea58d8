from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..db import delete_analysis, get_analysis, list_analyses_for_user, save_analysis
from ..models.insights import SaveAnalysisRequest, StoredAnalysis
from ..state import get_user_id

router = APIRouter(prefix="/entries", tags=["entries"])


@router.put("/{entry_id}/analysis", response_model=StoredAnalysis)
def v1_save_analysis(
    entry_id: str,
    payload: SaveAnalysisRequest,
    user_id: str = Depends(get_user_id),
) -> StoredAnalysis:
    record = save_analysis(
        user_id,
        entry_id,
        payload.analysis.model_dump(),
        perspective=payload.perspective,
        insights=payload.insights,
    )
    return StoredAnalysis(**record)


@router.get("/{entry_id}/analysis", response_model=StoredAnalysis)
def v1_get_analysis(entry_id: str, user_id: str = Depends(get_user_id)) -> StoredAnalysis:
    record = get_analysis(user_id, entry_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No analysis stored for entry {entry_id}")
    return StoredAnalysis(**record)


@router.delete("/{entry_id}/analysis")
def v1_delete_analysis(entry_id: str, user_id: str = Depends(get_user_id)) -> Dict[str, Any]:
    deleted = delete_analysis(user_id, entry_id)
    if deleted == 0:
        raise HTTPException(status_code=404, detail=f"No analysis stored for entry {entry_id}")
    return {"ok": True, "entry_id": entry_id, "deleted": deleted}


@router.get("", response_model=List[StoredAnalysis])
def v1_list_analyses(
    limit: int = Query(200, ge=1, le=1000),
    user_id: str = Depends(get_user_id),
) -> List[StoredAnalysis]:
    return [StoredAnalysis(**r) for r in list_analyses_for_user(user_id, limit=limit)]
