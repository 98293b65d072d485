from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campaign_market.api import deps
from campaign_market.api.errors import unwrap
from campaign_market.db.session import get_db
from campaign_market.schemas.applications import ApplicationCreate, ApplicationRead
from campaign_market.schemas.common import ErrorResponse
from campaign_market.services.application_service import apply_to_campaign
from campaign_market.services.audit_service import log_action

router = APIRouter(
    prefix="/applications",
    tags=["applications"],
    responses={code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409)},
)


@router.post("", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
def create_application_endpoint(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    """
    인플루언서가 모집중인 체험단에 지원한다. 체험단당 한 번만 지원할 수 있다.
    """
    application = unwrap(apply_to_campaign(db, current_user.id, payload))
    log_action(
        db,
        user_id=current_user.id,
        action="application.create",
        target_type="application",
        target_id=str(application.id),
        ip_address=context.ip_address,
        user_agent=context.user_agent,
        commit=True,
    )
    return application
