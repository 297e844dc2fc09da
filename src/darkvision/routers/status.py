from fastapi import APIRouter, Depends, Response

from darkvision.dependencies import get_storage
from darkvision.schemas.status import StatusResponse
from darkvision.services.storage import MediaStorage

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def get_status(
    response: Response,
    storage: MediaStorage = Depends(get_storage),
) -> StatusResponse:
    """Overview of the current processing state, from the content of the store."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = (
        "Origin, X-Requested-With, Content-Type, Accept"
    )
    return StatusResponse.model_validate(storage.status())
