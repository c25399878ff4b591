"""Items — CRUD endpoints plus the process-all batch trigger.

Invariants:
    - Payloads validated by Pydantic before reaching the handler (400 on failure)
    - Missing items → ResourceNotFoundError (404); duplicate email → 409
    - /process returns exactly what ItemProcessor.process_all() produced

Design Decisions:
    - /process registered before /{item_id} so the literal path wins
    - Repository and pool injected via Depends: tests override both
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from app.config import get_settings
from app.core.domain_types import ItemId
from app.core.errors import ErrorContext, ResourceNotFoundError
from app.infrastructure.item_repository import SqlItemRepository, get_item_repository
from app.infrastructure.worker_pool import WorkerPool, get_worker_pool
from app.models.item import Item
from app.schemas.item import ItemResponse, ItemWrite
from app.services.item_processor import ItemProcessor

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/items", tags=["items"])


def get_item_processor(
    repository: SqlItemRepository = Depends(get_item_repository),
    pool: WorkerPool = Depends(get_worker_pool),
) -> ItemProcessor:
    delay_seconds = get_settings().processing_delay_ms / 1000
    return ItemProcessor(repository, pool, delay_seconds)


async def get_item_or_404(
    item_id: ItemId, repository: SqlItemRepository,
) -> Item:
    item = await repository.find_by_id(item_id)
    if item is None:
        logger.warning(f"Item {item_id} not found", extra={"item_id": item_id})
        raise ResourceNotFoundError(
            "Item", str(item_id), ErrorContext(item_id=item_id),
        )
    return item


@router.get("", response_model=list[ItemResponse])
async def list_items(
    repository: SqlItemRepository = Depends(get_item_repository),
):
    """List all items."""
    logger.info("Retrieving all items")
    return await repository.list_all()


@router.post(
    "", response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    body: ItemWrite,
    repository: SqlItemRepository = Depends(get_item_repository),
):
    """Create a new item."""
    logger.info(f"Creating new item: {body.name}")
    return await repository.save(Item(**body.model_dump(mode="json")))


@router.get("/process", response_model=list[ItemResponse])
async def process_items(
    processor: ItemProcessor = Depends(get_item_processor),
):
    """Process all items; returns the ones that reached PROCESSED."""
    logger.info("Starting batch processing of all items")
    return await processor.process_all()


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: int,
    repository: SqlItemRepository = Depends(get_item_repository),
):
    """Get item by id."""
    return await get_item_or_404(ItemId(item_id), repository)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: int,
    body: ItemWrite,
    repository: SqlItemRepository = Depends(get_item_repository),
):
    """Replace an existing item."""
    await get_item_or_404(ItemId(item_id), repository)
    logger.info(f"Updating item {item_id}", extra={"item_id": item_id})
    return await repository.save(Item(id=item_id, **body.model_dump(mode="json")))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    repository: SqlItemRepository = Depends(get_item_repository),
):
    """Delete an item."""
    await get_item_or_404(ItemId(item_id), repository)
    logger.info(f"Deleting item {item_id}", extra={"item_id": item_id})
    await repository.delete(ItemId(item_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
