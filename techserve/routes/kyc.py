# techserve/routes/kyc.py
from fastapi import APIRouter, Depends, HTTPException, status
from uuid import UUID
import asyncpg
import logging

from ..config import settings
from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.common import Page
from ..models.kyc import (
    KycFinalDecision,
    KycReviewItem,
    KycStatistics,
    KycStatusOut,
    KycSubmission,
    VerificationStatus
)
from ..models.technician import KycDecisionResult, KycSubmissionResult
from ..queries import kyc_queries, technician_queries
from ..services import kyc
from ..services.notifier import notify_admins_for_review, notify_technician_of_decision
from ..utils.auth import ensure_self_or_admin, require_roles
from ..utils.models import PaginationParams, page_of, pagination_params

kyc_router = APIRouter(tags=["Technician KYC"])
logger = logging.getLogger(__name__)

@kyc_router.post("/technicians/{technician_id}/firebase-kyc", response_model=KycSubmissionResult)
async def submit_kyc_result(
    technician_id: UUID,
    payload: KycSubmission,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    """Record the upstream identity check and settle what can be settled automatically."""
    ensure_self_or_admin(current_user, technician_id)
    technician = await technician_queries.get_technician_by_id(conn, technician_id)
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")
    if technician["verification_status"] != VerificationStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Technician is already {technician['verification_status']}; upload new documents to restart verification"
        )

    outcome = kyc.evaluate_submission(
        payload.firebase_kyc_status,
        payload.confidence_score,
        auto_approve_confidence=settings.kyc_auto_approve_confidence
    )
    result_data = kyc.build_result_data(
        payload.firebase_kyc_data,
        payload.document_urls,
        payload.confidence_score,
        outcome.requires_admin_review
    )
    updated = await kyc_queries.record_kyc_result(
        conn,
        technician_id,
        payload.firebase_kyc_status.value,
        result_data.model_dump(mode="json", by_alias=True),
        outcome.verification_status.value
    )
    if not updated:
        if not await technician_queries.get_technician_by_id(conn, technician_id):
            raise HTTPException(status_code=404, detail="Technician not found")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Technician verification was settled meanwhile; reload and retry"
        )

    logger.info(
        f"KYC result {payload.firebase_kyc_status.value} (confidence {payload.confidence_score}) "
        f"for technician {technician_id} -> {outcome.verification_status.value}"
    )
    if outcome.requires_admin_review:
        await notify_admins_for_review(conn, str(technician_id), updated["username"])

    return {
        "message": "Firebase KYC results processed successfully",
        "technician": updated,
        "requires_admin_review": outcome.requires_admin_review
    }

@kyc_router.get("/technicians/{technician_id}/kyc-status", response_model=KycStatusOut)
async def get_kyc_status(
    technician_id: UUID,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, technician_id)
    technician = await technician_queries.get_technician_by_id(conn, technician_id)
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")
    return {"technician_id": technician["id"], **technician}

@kyc_router.get("/kyc-admin/technicians/pending-review", response_model=Page[KycReviewItem])
async def list_pending_review(
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    technicians = await kyc_queries.list_pending_review(conn, params.limit, params.offset)
    total = await kyc_queries.count_pending_review(conn)
    return page_of(technicians, total, params)

@kyc_router.post(
    "/kyc-admin/technicians/{technician_id}/final-verification",
    response_model=KycDecisionResult
)
async def admin_final_verification(
    technician_id: UUID,
    payload: KycFinalDecision,
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    technician = await technician_queries.get_technician_by_id(conn, technician_id)
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")

    updated = await kyc_queries.record_admin_decision(
        conn,
        technician_id,
        kyc.decision_status(payload.decision).value,
        payload.admin_notes,
        expected_version=payload.expected_version
    )
    if not updated:
        if not await technician_queries.get_technician_by_id(conn, technician_id):
            raise HTTPException(status_code=404, detail="Technician not found")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Technician was modified by someone else; reload and retry"
        )

    decision = payload.decision.value
    logger.info(f"Admin {current_user.id} {decision}d technician {technician_id}")
    await notify_technician_of_decision(conn, str(technician_id), decision, payload.admin_notes)

    return {"message": f"Technician {decision}d successfully", "technician": updated}

@kyc_router.get("/kyc-admin/kyc-statistics", response_model=KycStatistics)
async def get_kyc_statistics(
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    rows = await kyc_queries.status_counts(conn)
    return kyc.tally_statistics(rows)

__all__ = ["kyc_router"]
