# storefront/domain/validation.py
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from storefront.domain.errors import ValidationError
from storefront.domain.schemas import PaymentDetails, ShippingInfo


def _parse(model: type[BaseModel], data, label: str):
    if isinstance(data, model):
        return data
    if not isinstance(data, dict):
        raise ValidationError(f"{label} must be an object")
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ValidationError(f"{label} is missing required fields: {', '.join(fields)}") from e


def parse_shipping(data) -> ShippingInfo:
    return _parse(ShippingInfo, data, "Shipping information")


def parse_payment_details(data) -> PaymentDetails:
    return _parse(PaymentDetails, data, "Payment details")
