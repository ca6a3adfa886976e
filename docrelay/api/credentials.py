"""Saved browser sessions, keyed by (userId, platform)."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from docrelay.dependencies import get_credentials_repo
from docrelay.schemas.edit_schema import SaveCredentialsRequest
from docrelay.storage.credentials_repo import CredentialsRepo

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def save_credentials(req: SaveCredentialsRequest, repo: CredentialsRepo = Depends(get_credentials_repo)):
    try:
        updated_at = repo.save(req.user_id, req.platform, req.auth_state)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    logger.info("credentials saved user=%s platform=%s", req.user_id, req.platform)
    return {"saved": True, "userId": req.user_id, "platform": req.platform, "updatedAt": updated_at}


@router.get("/{user_id}")
async def list_credentials(user_id: str, repo: CredentialsRepo = Depends(get_credentials_repo)):
    try:
        platforms = repo.list_platforms(user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"userId": user_id, "platforms": platforms}


@router.delete("/{user_id}/{platform}")
async def delete_credentials(user_id: str, platform: str, repo: CredentialsRepo = Depends(get_credentials_repo)):
    try:
        deleted = repo.delete(user_id, platform)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=404, detail=f"No saved {platform} session for {user_id}")
    logger.info("credentials deleted user=%s platform=%s", user_id, platform)
    return {"deleted": True, "userId": user_id, "platform": platform}
