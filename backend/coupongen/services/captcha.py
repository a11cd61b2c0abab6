"""CAPTCHA verification for the public submit endpoint."""
import logging
from typing import Any

import httpx
from fastapi import HTTPException, status

from coupongen.config import get_settings

logger = logging.getLogger(__name__)


async def _post_verify(url: str, payload: dict[str, Any]) -> dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            resp = await client.post(url, data=payload)
    except httpx.HTTPError as e:
        logger.error(f"CAPTCHA provider unreachable: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="CAPTCHA verification failed")
    if resp.status_code != 200:
        logger.error(f"CAPTCHA provider returned {resp.status_code}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="CAPTCHA verification failed")
    parsed = resp.json() if resp.content else {}
    return parsed if isinstance(parsed, dict) else {}


async def verify(token: str | None, *, remote_ip: str | None = None) -> None:
    """No-op unless CAPTCHA is enabled; raises HTTPException on failure."""
    settings = get_settings()
    if not settings.captcha_enabled:
        return

    secret = (settings.captcha_secret_key or "").strip()
    if not secret:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="CAPTCHA secret key missing")

    token = (token or "").strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CAPTCHA required")

    payload = {"secret": secret, "response": token}
    if remote_ip:
        payload["remoteip"] = remote_ip

    data = await _post_verify(settings.captcha_verify_url, payload)
    if not bool(data.get("success")):
        logger.warning(f"CAPTCHA rejected for {remote_ip or 'unknown ip'}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CAPTCHA verification failed")
