import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from docrelay.dependencies import get_pipeline
from docrelay.errors import AutomationFailure, RelayError
from docrelay.schemas.edit_schema import EditDocRequest, OperationResult
from docrelay.services.edit_pipeline import EditPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=OperationResult)
async def edit_doc(request: EditDocRequest, pipeline: EditPipeline = Depends(get_pipeline)):
    start = time.monotonic()
    try:
        return await pipeline.run(request)
    except RelayError as e:
        elapsed_ms = (time.monotonic() - start) * 1000
        log = logger.warning if e.status_code < 500 else logger.error
        log(
            "edit_doc failed url=%s kind=%s status=%d elapsed_ms=%.1f error=%s",
            request.target_url,
            e.kind,
            e.status_code,
            elapsed_ms,
            e.message,
        )
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception("edit_doc crashed url=%s", request.target_url)
        failure = AutomationFailure(f"An error occurred during automation: {e}")
        raise HTTPException(status_code=failure.status_code, detail=failure.to_detail())
