import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from careerai.database import get_db
from careerai.dependencies import get_current_user_id
from careerai.repos.application_repo import create as create_application
from careerai.schemas.application import (
    ApplicationCreate,
    ApplicationResponse,
    BulkApplyRequest,
    BulkApplyResponse,
)
from careerai.services.action_client import DatabaseApplicationStore
from careerai.services.bulk_apply import run_bulk_apply
from careerai.services.dispatcher import dispatch

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def save_application(
    data: ApplicationCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    try:
        record = create_application(db, user_id, data.job, data.cover_letter)
    except Exception as e:
        logger.exception("Failed saving application for user=%s: %s", user_id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save application") from e
    logger.info("Application saved for user %s", user_id)
    return record


@router.post("/bulk-apply", response_model=BulkApplyResponse)
def bulk_apply(
    data: BulkApplyRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Cover letter + saved application for each job (first N only), one job at a time."""
    report = run_bulk_apply(
        data.jobs,
        data.resume_text,
        user_id,
        dispatch_fn=dispatch,
        save_fn=DatabaseApplicationStore(db),
    )
    return report.to_dict()
