"""Random identifiers: campaign/coupon codes and form link tokens."""
import secrets
import string
from typing import NewType

CODE_ALPHABET = string.ascii_uppercase + string.digits

# Bearer capability handed to anonymous visitors; never an internal id.
FormToken = NewType("FormToken", str)


def generate_code(length: int = 12) -> str:
    """Uppercase alphanumeric code from a CSPRNG (campaign and coupon codes)."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_form_token(nbytes: int = 24) -> FormToken:
    """URL-safe token carrying ``nbytes * 8`` bits of entropy."""
    if nbytes < 16:
        raise ValueError("form tokens need at least 128 bits of entropy")
    return FormToken(secrets.token_urlsafe(nbytes))
