from typing import AsyncIterator, List
from uuid import uuid4
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..schemas.hypernetwork import PersonView, SearchQuery
from ..services.connectors import BaseConnector, get_connector
from ..services.search import search_students

router = APIRouter(tags=["hypernetwork"])

logger = logging.getLogger(__name__)


async def get_gateway() -> AsyncIterator[BaseConnector]:
    """One Notion gateway (and HTTP connection pool) per request."""
    async with get_connector() as gateway:
        yield gateway


@router.post(
    "/hypernetwork",
    response_model=List[PersonView],
    response_class=JSONResponse,
)
async def search_hypernetwork(
    payload: SearchQuery,
    gateway: BaseConnector = Depends(get_gateway),
):
    # Correlation ID so one search can be followed across its store lookups
    request_id = str(uuid4())

    logger.info(
        "Searching hyper network",
        extra={
            "request_id": request_id,
            "step": "search_hypernetwork",
        },
    )

    views = await search_students(gateway, payload, request_id=request_id)

    logger.info(
        "Search complete",
        extra={
            "request_id": request_id,
            "step": "search_complete",
            "count": len(views),
        },
    )

    # response_model only documents the OpenAPI contract. The views are
    # serialized here so an absent contact stays {} instead of being
    # re-validated into an all-defaults ContactEntry.
    return JSONResponse(
        content=[v.model_dump(mode="json", by_alias=True) for v in views]
    )
