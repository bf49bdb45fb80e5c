"""Payment Schemas — card form fields checked by core/payment.py."""

from pydantic import BaseModel, Field


class PaymentRequest(BaseModel):
    card_number: str = Field(max_length=40)
    expiry_date: str = Field(max_length=10)
    cvv: str = Field(max_length=10)


class PaymentValidationResponse(BaseModel):
    success: bool
    message: str
    reason: str | None = None
