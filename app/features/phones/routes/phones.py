from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.dependencies.auth import get_current_admin
from app.features.phones.schemas.phone import PhoneCreate, PhoneResponse, PhoneUpdate
from app.features.phones.services.phone import (
    create_phone,
    delete_phone,
    get_phone,
    list_phones,
    update_phone,
)
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/phones", tags=["Phones"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=dict, summary="List phones")
async def list_phones_route(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    phones, total = await list_phones(db, skip=skip, limit=limit, search=search, is_active=is_active)
    return api_response(
        data={
            "items": [PhoneResponse.model_validate(p) for p in phones],
            "total": total,
            "skip": skip,
            "limit": limit,
        },
        message="Phones retrieved successfully",
    )


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED, summary="Create a phone")
async def create_phone_route(request: PhoneCreate, db: AsyncSession = Depends(get_db)):
    phone = await create_phone(db, request)
    return api_response(
        data=PhoneResponse.model_validate(phone),
        message="Phone created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{phone_id}", response_model=dict, summary="Get a phone")
async def get_phone_route(phone_id: str, db: AsyncSession = Depends(get_db)):
    phone = await get_phone(db, phone_id)
    return api_response(data=PhoneResponse.model_validate(phone), message="Phone retrieved successfully")


@router.patch("/{phone_id}", response_model=dict, summary="Update a phone")
async def update_phone_route(phone_id: str, request: PhoneUpdate, db: AsyncSession = Depends(get_db)):
    phone = await update_phone(db, phone_id, request)
    return api_response(data=PhoneResponse.model_validate(phone), message="Phone updated successfully")


@router.delete("/{phone_id}", response_model=dict, summary="Delete a phone")
async def delete_phone_route(phone_id: str, db: AsyncSession = Depends(get_db)):
    await delete_phone(db, phone_id)
    return api_response(message="Phone deleted successfully")
