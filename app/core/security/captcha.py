from typing import Optional
import httpx
from app.core.errors import CaptchaError, InternalError
from app.core.logger import logger
from app.core.settings import Settings


class TurnstileVerifier:
    """Pass/fail gate backed by Cloudflare Turnstile; disabled without a secret."""

    def __init__(self, settings: Settings) -> None:
        self._url = f"{settings.CF_TURNSTILE_API_URL}/turnstile/v0/siteverify"
        self._secret = settings.CF_TURNSTILE_SECRET_KEY.get_secret_value()
        self._timeout = settings.STORE_TIMEOUT_SEC
        self.enabled = settings.captcha_enabled

    async def verify(self, token: Optional[str], remote_ip: Optional[str] = None) -> None:
        if not self.enabled:
            return
        if not token:
            raise CaptchaError("CAPTCHA Response is Required", code="CAPTCHA_REQUIRED")

        form = {"secret": self._secret, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as cli:
                r = await cli.post(self._url, data=form)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[Captcha] verification call failed: %s", e, exc_info=True)
            raise InternalError(f"Internal Server Error: {e}") from e

        if not data.get("success"):
            logger.warning("[Captcha] rejected token from %s: %s", remote_ip, data.get("error-codes"))
            raise CaptchaError("CAPTCHA Already Used! Please Reload Page to Continue.", code="CAPTCHA_FAILED")
