# truekind/api/routers/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from truekind.api.deps import get_current_user
from truekind.data.database import get_db
from truekind.domain.schemas.commerce import OrderOut, PaymentOrderIn, PaymentOrderOut, PaymentVerifyIn
from truekind.domain.schemas.common import SessionUser
from truekind.services.payment_client import PaymentGatewayClient
from truekind.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


def get_service(db: Session):
    return PaymentService(db=db, gateway=PaymentGatewayClient())


@router.post("/orders", response_model=PaymentOrderOut, status_code=201)
def create_payment_order(
    payload: PaymentOrderIn,
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_gateway_order(payload.order_id, user, payload.session_id)


@router.post("/verify", response_model=OrderOut)
def verify_payment(
    payload: PaymentVerifyIn,
    user: SessionUser | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).verify(payload, user, payload.session_id)
