from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from influencer_admin.config import settings
from influencer_admin.deps import get_content_repository, mark_degraded
from influencer_admin.repositories import TableRepository
from influencer_admin.schemas import Content, ContentCreate, ContentUpdate
from influencer_admin.security import require_admin_token

router = APIRouter(prefix="/content", tags=["content"], dependencies=[Depends(require_admin_token)])


@router.get("", response_model=list[Content])
async def list_content(
    response: Response,
    repository: TableRepository = Depends(get_content_repository),
):
    listing = await repository.list()
    mark_degraded(response, listing.degraded)
    return listing.items


@router.post("", response_model=Content, status_code=status.HTTP_201_CREATED)
async def create_content(
    payload: ContentCreate,
    response: Response,
    repository: TableRepository = Depends(get_content_repository),
):
    record = payload.model_dump(mode="json")
    record["companyId"] = record.get("companyId") or settings.DEFAULT_COMPANY_ID
    stored = await repository.create(record)
    mark_degraded(response, stored.degraded)
    return stored.record


@router.patch("/{content_id}", response_model=Content)
async def update_content(
    content_id: str,
    payload: ContentUpdate,
    response: Response,
    repository: TableRepository = Depends(get_content_repository),
):
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    stored = await repository.update(content_id, changes)
    mark_degraded(response, stored.degraded)
    return stored.record
