from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.core.dependencies import get_db
from app.services.item_service import (
    get_item_by_id,
    get_all_items,
    create_item,
    update_item,
)
from app.schemas.item import (
    ItemCreate,
    ItemUpdate,
    ItemResponse,
    ItemListResponse,
)
from app.logger_config import logger

router = APIRouter()


@router.get("", response_model=ItemListResponse)
def get_items(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    search: Optional[str] = Query(None),
    below_reorder: bool = Query(False),
    db: Session = Depends(get_db)
):
    """
    Get all items, optionally only those at or under their reorder level.
    """
    try:
        items, total = get_all_items(
            db,
            skip=skip,
            limit=limit,
            search=search,
            below_reorder=below_reorder,
        )

        return ItemListResponse(
            total=total,
            items=[ItemResponse.model_validate(item) for item in items]
        )
    except Exception as e:
        logger.error(f"Error fetching items: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch items"
        )


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: str,
    db: Session = Depends(get_db)
):
    """
    Get item by ID.
    """
    item = get_item_by_id(db, item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found"
        )

    return ItemResponse.model_validate(item)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item_route(
    item_data: ItemCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new item.
    """
    try:
        item = create_item(
            db=db,
            item_name=item_data.item_name,
            supplier=item_data.supplier,
            reorder_level=item_data.reorder_level,
            stock=item_data.stock,
        )

        logger.info(f"Item {item.item_name} created")

        return ItemResponse.model_validate(item)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.put("/{item_id}", response_model=ItemResponse)
def update_item_route(
    item_id: str,
    item_data: ItemUpdate,
    db: Session = Depends(get_db)
):
    """
    Update item information.
    """
    try:
        item = update_item(db=db, item_id=item_id, **item_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found"
        )

    logger.info(f"Item {item_id} updated")

    return ItemResponse.model_validate(item)
