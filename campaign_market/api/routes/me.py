from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campaign_market.api import deps
from campaign_market.api.errors import unwrap
from campaign_market.db.session import get_db
from campaign_market.schemas.applications import MyApplicationList, MyApplicationsQuery
from campaign_market.services.application_service import list_my_applications

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/applications", response_model=MyApplicationList)
def list_my_applications_endpoint(
    query: Annotated[MyApplicationsQuery, Query()],
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
):
    return unwrap(list_my_applications(db, current_user.id, query))
