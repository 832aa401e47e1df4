from fastapi import Depends

from app.api.router import create_router
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.services import get_payment_intent_service
from app.schemas.payment import PaymentIntent, PaymentIntentRequest
from app.services.payment_services import PaymentIntentService

router = create_router(name="payments", extra_responses={502: {"description": "Bad Gateway"}})

@router.post("/intents", response_model=PaymentIntent, status_code=201)
def create_payment_intent(
	body: PaymentIntentRequest,
	current_user=Depends(get_current_user),
	payment_service: PaymentIntentService = Depends(get_payment_intent_service)
):
	"""Generate a UPI payment intent with its QR code for a group contribution."""
	return payment_service.generate_intent(body.group_id, body.item_id, current_user.id, body.amount)
