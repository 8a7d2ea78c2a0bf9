from typing import Optional

from pydantic import BaseModel, Field, field_validator

from gamification.core.database import is_object_id
from gamification.core.validation import RequestSchema


class ProcessPaymentRequest(RequestSchema):
    messages = {
        "cardToken": "Please provide a card token",
        "amount": "Amount must be a positive number",
    }

    card_token: str = Field(..., alias="cardToken", min_length=1)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    course_id: Optional[str] = Field(None, alias="courseId")

    @field_validator("course_id")
    @classmethod
    def course_id_valid(cls, v):
        if v is not None and not is_object_id(v):
            raise ValueError("Invalid course id")
        return v


class CardDetails(BaseModel):
    number: str = Field(..., min_length=12, max_length=19)
    cvv: str = Field(..., min_length=3, max_length=4)
    expiry_month: str = Field(..., min_length=1, max_length=2)
    expiry_year: str = Field(..., min_length=2, max_length=4)


class ChargeCardRequest(RequestSchema):
    messages = {
        "amount": "Amount must be a positive number",
        "card": "Please provide valid card details",
    }

    amount: float = Field(..., gt=0, allow_inf_nan=False)
    currency: Optional[str] = None
    card: CardDetails
    redirect_url: Optional[str] = Field(None, alias="redirectUrl")


class SaveCardRequest(RequestSchema):
    messages = {
        "token": "Please provide the card token",
    }

    token: str = Field(..., min_length=1)
