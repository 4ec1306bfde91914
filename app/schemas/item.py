from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ItemBase(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=100)
    supplier: Optional[str] = Field(None, max_length=255)
    reorder_level: int = Field(0, ge=0)


class ItemCreate(ItemBase):
    stock: int = 0


class ItemUpdate(BaseModel):
    item_name: Optional[str] = Field(None, min_length=1, max_length=100)
    supplier: Optional[str] = Field(None, max_length=255)
    reorder_level: Optional[int] = Field(None, ge=0)
    stock: Optional[int] = None


class ItemResponse(ItemBase):
    id: str
    stock: int
    needs_reorder: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ItemListResponse(BaseModel):
    total: int
    items: list[ItemResponse]
