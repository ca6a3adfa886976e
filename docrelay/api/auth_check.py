"""Check an OAuth access token without launching a browser."""
from fastapi import APIRouter, Depends, HTTPException

from docrelay.dependencies import get_token_validator
from docrelay.errors import AuthenticationInvalid, InputError
from docrelay.schemas.edit_schema import AuthCheckRequest
from docrelay.services.credential_resolver import TokenValidator

router = APIRouter()


@router.post("")
async def check_auth(req: AuthCheckRequest, validator: TokenValidator = Depends(get_token_validator)):
    if req.credentials is None or not req.credentials.access_token:
        error = InputError("OAuth credentials with access_token are required for testing.")
        raise HTTPException(status_code=error.status_code, detail=error.to_detail())
    try:
        info = await validator.validate(req.credentials.access_token)
    except AuthenticationInvalid as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return {
        "authenticated": True,
        "email": info.get("email"),
        "expiresIn": info.get("expires_in"),
        "scope": info.get("scope"),
    }
