# techserve/routes/payments.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
import asyncpg

from ..config import settings
from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.common import Message
from ..models.payment import PaymentCreate, PaymentOut, PaymentReceipt, PaymentStatus, StkCallbackEnvelope
from ..queries import payment_queries
from ..services.mpesa import PaymentGatewayError, daraja_client, simulated_transaction_id
from ..utils.auth import get_current_user, require_roles
from .appointments import ensure_participant, get_appointment_for

logger = logging.getLogger(__name__)

payments_router = APIRouter(prefix="/payments", tags=["Payments"])

@payments_router.post("/", response_model=PaymentReceipt, status_code=status.HTTP_201_CREATED)
async def initiate_payment(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(require_roles(Role.USER, Role.TECHNICIAN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_appointment_for(payload.appointment_id, current_user, conn)

    try:
        push = await daraja_client.initiate_payment(
            amount=payload.amount,
            phone_number=payload.phone_number,
            account_reference=f"APPT-{payload.appointment_id}",
            callback_url=settings.mpesa_callback_url
        )
    except PaymentGatewayError as e:
        raise HTTPException(status_code=502, detail=f"Payment gateway error: {str(e)}")

    payment = await payment_queries.create_payment(
        conn, payload.appointment_id, push.checkout_request_id, payload.amount
    )
    logger.info(f"Payment {payment['id']} initiated for appointment {payload.appointment_id}")
    return {"message": "Payment initiated", "payment": payment}

@payments_router.post("/callback", response_model=Message)
async def payment_callback(
    envelope: StkCallbackEnvelope,
    conn: asyncpg.Connection = Depends(get_db)
):
    callback = envelope.Body.stkCallback
    transaction_id = callback.CheckoutRequestID

    payment = await payment_queries.get_payment_by_transaction(conn, transaction_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")

    new_status = PaymentStatus.COMPLETED if callback.ResultCode == 0 else PaymentStatus.FAILED
    settled = await payment_queries.settle_payment(conn, transaction_id, new_status.value)
    if not settled:
        logger.info(f"Callback for settled payment {transaction_id} ignored")
        return {"message": f"Payment already {payment['status']}"}

    logger.info(f"Payment {transaction_id} marked {new_status.value}: {callback.ResultDesc}")
    return {"message": f"Payment {new_status.value}"}

@payments_router.post("/simulate", response_model=PaymentReceipt, status_code=status.HTTP_201_CREATED)
async def simulate_payment(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(require_roles(Role.USER, Role.TECHNICIAN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_appointment_for(payload.appointment_id, current_user, conn)
    payment = await payment_queries.create_payment(
        conn,
        payload.appointment_id,
        simulated_transaction_id(),
        payload.amount,
        status=PaymentStatus.COMPLETED.value
    )
    return {"message": "Payment completed", "payment": payment}

@payments_router.get("/{payment_id}", response_model=PaymentOut)
async def get_payment(
    payment_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    payment = await payment_queries.get_payment_by_id(conn, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    ensure_participant(current_user, payment)
    return payment

__all__ = ["payments_router"]
