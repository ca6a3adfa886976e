from fastapi import APIRouter, Depends, HTTPException

from docrelay.dependencies import get_detector
from docrelay.errors import InputError
from docrelay.schemas.edit_schema import DetectFileRequest, DetectFileResponse
from docrelay.services.platform_detector import PlatformDetector

router = APIRouter()


@router.post("", response_model=DetectFileResponse)
async def detect_file(request: DetectFileRequest, detector: PlatformDetector = Depends(get_detector)):
    if not (request.url or request.content or request.filename):
        error = InputError("Provide 'url', or 'content' and/or 'filename'.")
        raise HTTPException(status_code=error.status_code, detail=error.to_detail())

    platform = detector.detect(url=request.url, content=request.content, filename=request.filename)
    if platform is None:
        return DetectFileResponse(recognized=False)
    return DetectFileResponse(
        recognized=True,
        platform=platform.name,
        credentialKey=platform.credential_key,
        supportedActions=sorted(platform.supported_actions, key=lambda k: k.value),
    )
