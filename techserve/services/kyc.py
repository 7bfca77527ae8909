"""
Technician verification (KYC) policy.

The upstream document check reports its own status and a confidence score;
these functions turn that report, or an admin's decision, into the
technician's final ``verification_status``. Nothing here touches the
database so the rules can be exercised on their own.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..models.kyc import (
    AdminDecision,
    FirebaseKycStatus,
    KycResultData,
    KycStatistics,
    VerificationStatus,
)

DEFAULT_AUTO_APPROVE_CONFIDENCE = 0.95


@dataclass(frozen=True)
class KycOutcome:
    verification_status: VerificationStatus
    requires_admin_review: bool


def evaluate_submission(
    kyc_status: FirebaseKycStatus,
    confidence_score: float,
    auto_approve_confidence: float = DEFAULT_AUTO_APPROVE_CONFIDENCE,
) -> KycOutcome:
    """
    Verified with confidence strictly above the threshold is approved
    outright, a rejection is final regardless of confidence, and everything
    else stays PENDING for an admin.
    """
    if kyc_status == FirebaseKycStatus.FIREBASE_VERIFIED and confidence_score > auto_approve_confidence:
        return KycOutcome(VerificationStatus.VERIFIED, requires_admin_review=False)
    if kyc_status == FirebaseKycStatus.FIREBASE_REJECTED:
        return KycOutcome(VerificationStatus.REJECTED, requires_admin_review=False)
    return KycOutcome(VerificationStatus.PENDING, requires_admin_review=True)


def build_result_data(
    provider_payload: Dict[str, Any],
    document_urls: List[str],
    confidence_score: float,
    requires_admin_review: bool,
    processed_at: Optional[datetime] = None,
) -> KycResultData:
    return KycResultData(
        confidence_score=confidence_score,
        document_urls=document_urls,
        processed_at=processed_at or datetime.now(timezone.utc),
        requires_admin_review=requires_admin_review,
        provider_payload=provider_payload,
    )


def decision_status(decision: AdminDecision) -> VerificationStatus:
    if decision == AdminDecision.APPROVE:
        return VerificationStatus.VERIFIED
    if decision == AdminDecision.REJECT:
        return VerificationStatus.REJECTED
    raise ValueError(f"Unknown decision: {decision}")


def tally_statistics(rows: Iterable[Dict[str, Any]]) -> KycStatistics:
    """
    Fold grouped (firebase_kyc_status, verification_status, count) rows into
    the dashboard buckets. Only technicians whose upstream check finished
    (verified or rejected) feed the approved / rejected / awaiting buckets;
    PROCESSING, FIREBASE_ERROR and ADMIN_REVIEW_REQUIRED are not counted.
    """
    stats = KycStatistics()
    finished = (FirebaseKycStatus.FIREBASE_VERIFIED, FirebaseKycStatus.FIREBASE_REJECTED)

    for row in rows:
        kyc_status = FirebaseKycStatus(row["firebase_kyc_status"])
        verification = VerificationStatus(row["verification_status"])
        count = row["count"]

        if kyc_status == FirebaseKycStatus.PENDING:
            stats.pending += count
            continue
        if kyc_status not in finished:
            continue

        if kyc_status == FirebaseKycStatus.FIREBASE_VERIFIED:
            stats.firebase_verified += count
        else:
            stats.firebase_rejected += count

        if verification == VerificationStatus.VERIFIED:
            stats.admin_approved += count
        elif verification == VerificationStatus.REJECTED:
            stats.admin_rejected += count
        else:
            stats.awaiting_admin_review += count

    return stats
