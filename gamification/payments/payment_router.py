import time

from fastapi import APIRouter, Depends

from gamification.auth.auth_models import UserCaller
from gamification.auth.auth_permissions import require_user
from gamification.core.responses import success
from gamification.core.validation import validate_body
from gamification.payments.payment_schemas import ChargeCardRequest, ProcessPaymentRequest, SaveCardRequest
from gamification.payments.payment_service import PaymentService, get_payment_service

router = APIRouter(prefix="/payment", tags=["Payment"])


@router.post("/process")
async def process_payment(
    user: UserCaller = Depends(require_user),
    data: ProcessPaymentRequest = Depends(validate_body(ProcessPaymentRequest)),
    payments: PaymentService = Depends(get_payment_service)
):
    result = await payments.process_payment(str(user.id), data.card_token, data.amount, data.course_id)
    return success(result, "Payment initiated")


@router.get("/verify/{transactionId}")
async def verify_payment(
    transactionId: str,
    user: UserCaller = Depends(require_user),
    payments: PaymentService = Depends(get_payment_service)
):
    result = await payments.verify_payment(transactionId)
    return success(result, "Payment verified")


@router.post("/charge")
async def charge_card(
    user: UserCaller = Depends(require_user),
    data: ChargeCardRequest = Depends(validate_body(ChargeCardRequest)),
    payments: PaymentService = Depends(get_payment_service)
):
    charge = {
        "tx_ref": f"TX-{int(time.time() * 1000)}",
        "amount": data.amount,
        "currency": data.currency or payments.currency,
        "redirect_url": data.redirect_url or payments.redirect_url,
        "payment_type": "card",
        "card": data.card.model_dump(),
        "customer": {"id": str(user.id), "email": user.email, "name": user.username},
    }
    result = await payments.charge_card(charge)
    return success(result, "Card charged")


@router.post("/cards")
async def save_card(
    user: UserCaller = Depends(require_user),
    data: SaveCardRequest = Depends(validate_body(SaveCardRequest)),
    payments: PaymentService = Depends(get_payment_service)
):
    result = await payments.save_card({
        "token": data.token,
        "customer": {"id": str(user.id), "email": user.email},
    })
    return success(result, "Card saved", 201)


@router.delete("/cards/{cardToken}")
async def delete_card(
    cardToken: str,
    user: UserCaller = Depends(require_user),
    payments: PaymentService = Depends(get_payment_service)
):
    result = await payments.delete_card(cardToken)
    return success(result, "Card deleted")
