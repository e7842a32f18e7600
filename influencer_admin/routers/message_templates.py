from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from influencer_admin.deps import get_template_repository, mark_degraded
from influencer_admin.repositories import TableRepository
from influencer_admin.schemas import MessageTemplate, MessageTemplateCreate
from influencer_admin.security import require_admin_token

router = APIRouter(
    prefix="/message-templates",
    tags=["message-templates"],
    dependencies=[Depends(require_admin_token)],
)


@router.get("", response_model=list[MessageTemplate])
async def list_message_templates(
    response: Response,
    repository: TableRepository = Depends(get_template_repository),
):
    listing = await repository.list()
    mark_degraded(response, listing.degraded)
    return listing.items


@router.post("", response_model=MessageTemplate, status_code=status.HTTP_201_CREATED)
async def create_message_template(
    payload: MessageTemplateCreate,
    response: Response,
    repository: TableRepository = Depends(get_template_repository),
):
    stored = await repository.create(payload.model_dump(mode="json"))
    mark_degraded(response, stored.degraded)
    return stored.record
