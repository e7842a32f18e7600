from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from influencer_admin.deps import get_influencer_repository, mark_degraded
from influencer_admin.repositories import TableRepository
from influencer_admin.schemas import Influencer, InfluencerCreate, InfluencerUpdate
from influencer_admin.security import require_admin_token

router = APIRouter(prefix="/influencers", tags=["influencers"], dependencies=[Depends(require_admin_token)])


@router.get("", response_model=list[Influencer])
async def list_influencers(
    response: Response,
    repository: TableRepository = Depends(get_influencer_repository),
):
    listing = await repository.list()
    mark_degraded(response, listing.degraded)
    return listing.items


@router.post("", response_model=Influencer, status_code=status.HTTP_201_CREATED)
async def create_influencer(
    payload: InfluencerCreate,
    response: Response,
    repository: TableRepository = Depends(get_influencer_repository),
):
    stored = await repository.create(payload.model_dump(mode="json"))
    mark_degraded(response, stored.degraded)
    return stored.record


@router.get("/{influencer_id}", response_model=Influencer)
async def get_influencer(
    influencer_id: str,
    response: Response,
    repository: TableRepository = Depends(get_influencer_repository),
):
    stored = await repository.get(influencer_id)
    mark_degraded(response, stored.degraded)
    return stored.record


@router.patch("/{influencer_id}", response_model=Influencer)
async def update_influencer(
    influencer_id: str,
    payload: InfluencerUpdate,
    response: Response,
    repository: TableRepository = Depends(get_influencer_repository),
):
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    stored = await repository.update(influencer_id, changes)
    mark_degraded(response, stored.degraded)
    return stored.record


@router.delete("/{influencer_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_influencer(
    influencer_id: str,
    repository: TableRepository = Depends(get_influencer_repository),
):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    mark_degraded(response, await repository.delete(influencer_id))
    return response
