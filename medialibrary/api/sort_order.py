"""Custom game order API routes"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.games import SortOrderUpdate, SortPositionOut
from ..services.library_service import LibraryError
from ..services.sort_order import SortOrderService
from .deps import http_error

router = APIRouter(prefix="/api/sort-order", tags=["sort-order"])


@router.get("", response_model=List[SortPositionOut])
async def get_sort_order(db: AsyncSession = Depends(get_db)):
    return await SortOrderService(db).get()


@router.put("", response_model=List[SortPositionOut])
async def replace_sort_order(data: SortOrderUpdate, db: AsyncSession = Depends(get_db)):
    """Store the submitted game ids as the complete order (position = index)"""
    try:
        return await SortOrderService(db).replace(data.order)
    except LibraryError as e:
        raise http_error(e)
