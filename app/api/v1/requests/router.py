from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.auth.schemas import CurrentAdmin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    RequestCreate,
    RequestResponse,
    RequestStatistics,
    RequestStatusUpdate,
    RequestUpdate,
)

router = APIRouter(
    prefix="/api/admin/requests",
    tags=["requests"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[RequestResponse])
async def list_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    request_type: Optional[str] = Query(None),
    requester_type: Optional[str] = Query(None),
    requester_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[RequestResponse]:
    return await service.list_requests(
        db,
        status=status_filter,
        request_type=request_type,
        requester_type=requester_type,
        requester_id=requester_id,
    )


@router.get("/statistics", response_model=RequestStatistics)
async def get_statistics(db: AsyncSession = Depends(get_db)) -> RequestStatistics:
    return await service.get_statistics(db)


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(request_id: int, db: AsyncSession = Depends(get_db)) -> RequestResponse:
    obj = await service.get_request(db, request_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
    return obj


@router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(payload: RequestCreate, db: AsyncSession = Depends(get_db)) -> RequestResponse:
    return await service.create_request(db, payload)


@router.put("/{request_id}", response_model=RequestResponse)
async def update_request(
    request_id: int,
    payload: RequestUpdate,
    db: AsyncSession = Depends(get_db),
) -> RequestResponse:
    try:
        obj = await service.update_request(db, request_id, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{request_id}/status", response_model=RequestResponse)
async def update_request_status(
    request_id: int,
    payload: RequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: CurrentAdmin = Depends(get_current_admin),
) -> RequestResponse:
    try:
        obj = await service.update_request_status(db, request_id, payload, current_admin)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(request_id: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_request(db, request_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
