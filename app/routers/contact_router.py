from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException

from app.config import settings
from app.schemas.contact_schema import ContactInfoOut, ContactRequest, ContactResult
from app.services.form_relay import FormRelayClient, FormRelayError, get_form_relay


router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("", response_model=ContactResult)
def submit_contact(
    payload: ContactRequest,
    relay: FormRelayClient = Depends(get_form_relay),
):
    try:
        result = relay.submit(payload)
    except FormRelayError:
        raise HTTPException(
            status_code=502,
            detail="Unable to send message. Please try again later.",
        )

    if result.success and not result.message:
        result.message = "Thank you for reaching out. I'll get back to you within 24 hours."
    if not result.success and not result.message:
        result.message = "Please try again later."

    return result


@router.get("/info", response_model=ContactInfoOut)
def contact_info():
    number = settings.WHATSAPP_NUMBER
    if not number:
        return ContactInfoOut()

    return ContactInfoOut(
        phone=f"+{number}",
        whatsapp_url=f"https://wa.me/{number}?text={quote(settings.WHATSAPP_MESSAGE)}",
    )
