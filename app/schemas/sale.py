from datetime import datetime, timezone
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from app.schemas.item import ItemResponse

# Range of the INTEGER quantity column
QUANTITY_MIN = -2**31
QUANTITY_MAX = 2**31 - 1


def _as_utc(value: datetime) -> datetime:
    # SQLite hands stored UTC values back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class SaleLineItem(BaseModel):
    item_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=QUANTITY_MIN, le=QUANTITY_MAX)

    model_config = ConfigDict(from_attributes=True)


class SaleCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    date: Optional[datetime] = None
    items: List[SaleLineItem] = Field(default_factory=list)


class SaleUpdate(BaseModel):
    user_id: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    items: Optional[List[SaleLineItem]] = None


class SaleResponse(BaseModel):
    """Sale as stored, line items keep the plain item id."""
    id: str
    user_id: str
    date: UtcDatetime
    items: List[SaleLineItem]

    model_config = ConfigDict(from_attributes=True)


class SaleUserRef(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ExpandedSaleLineItem(BaseModel):
    # Expanded item record, null when the item no longer exists
    item_id: Optional[ItemResponse] = None
    quantity: int


class SaleDetailResponse(BaseModel):
    id: str
    user_id: str
    date: UtcDatetime
    items: List[ExpandedSaleLineItem]


class SaleListEntry(BaseModel):
    id: str
    user_id: Optional[SaleUserRef] = None
    date: UtcDatetime
    items: List[ExpandedSaleLineItem]


class SaleDeleteResponse(BaseModel):
    message: str


class FrequentlySoldEntry(BaseModel):
    id: str
    user_id: str
    item_name: Optional[str] = None
    totalQuantitySold: int
    stock: Optional[int] = None
    supplier: Optional[str] = None
    reorder_level: Optional[int] = None
    user_name: str


class FrequentlySoldResponse(BaseModel):
    weekly: List[FrequentlySoldEntry]
    monthly: List[FrequentlySoldEntry]
    yearly: List[FrequentlySoldEntry]
