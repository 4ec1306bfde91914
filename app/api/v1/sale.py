from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.dependencies import get_db
from app.services.sale_service import (
    get_sale_by_id,
    get_all_sales,
    create_sale,
    update_sale,
    delete_sale,
    expand_sale,
    expand_sales,
)
from app.services.sales_report import get_frequently_sold_items
from app.schemas.sale import (
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    SaleDetailResponse,
    SaleListEntry,
    SaleDeleteResponse,
    FrequentlySoldResponse,
)
from app.logger_config import logger

router = APIRouter()

SALE_NOT_FOUND = "Sale not found"


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
def create_sale_route(
    sale_data: SaleCreate,
    db: Session = Depends(get_db)
):
    """
    Record a sale and take its quantities out of stock.
    """
    try:
        sale = create_sale(
            db=db,
            user_id=sale_data.user_id,
            date=sale_data.date,
            items=[line.model_dump() for line in sale_data.items],
        )
        return SaleResponse.model_validate(sale)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error creating sale: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create sale"
        )


@router.get("", response_model=List[SaleListEntry])
def get_sales(db: Session = Depends(get_db)):
    """
    Get all sales with item records and user names expanded.
    """
    try:
        sales = get_all_sales(db)
        return [
            SaleListEntry.model_validate(entry, from_attributes=True)
            for entry in expand_sales(db, sales)
        ]
    except Exception as e:
        logger.error(f"Error fetching sales: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch sales"
        )


# Declared before /{sale_id} so the path is not read as an id
@router.get("/frequently-sold", response_model=FrequentlySoldResponse)
def get_frequently_sold(db: Session = Depends(get_db)):
    """
    Quantity sold per item and user over the last week, month and year.
    """
    try:
        return FrequentlySoldResponse(**get_frequently_sold_items(db))
    except Exception as e:
        logger.exception("Error building frequently sold report")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build frequently sold report"
        )


@router.get("/{sale_id}", response_model=SaleDetailResponse)
def get_sale(
    sale_id: str,
    db: Session = Depends(get_db)
):
    """
    Get sale by ID with item records expanded.
    """
    sale = get_sale_by_id(db, sale_id)
    if not sale:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=SALE_NOT_FOUND
        )

    return SaleDetailResponse.model_validate(expand_sale(db, sale), from_attributes=True)


@router.put("/{sale_id}", response_model=SaleResponse)
def update_sale_route(
    sale_id: str,
    sale_data: SaleUpdate,
    db: Session = Depends(get_db)
):
    """
    Update sale fields. Stock levels are not adjusted.
    """
    fields = sale_data.model_dump(exclude_unset=True)
    try:
        sale = update_sale(
            db=db,
            sale_id=sale_id,
            user_id=fields.get("user_id"),
            date=fields.get("date"),
            items=fields.get("items"),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not sale:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=SALE_NOT_FOUND
        )

    logger.info(f"Sale {sale_id} updated")
    return SaleResponse.model_validate(sale)


@router.delete("/{sale_id}", response_model=SaleDeleteResponse)
def delete_sale_route(
    sale_id: str,
    db: Session = Depends(get_db)
):
    """
    Delete a sale and return its quantities to stock.
    """
    try:
        deleted = delete_sale(db, sale_id)
    except Exception as e:
        logger.error(f"Error deleting sale: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete sale"
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=SALE_NOT_FOUND
        )

    return SaleDeleteResponse(message="Sale deleted")
