"""Client for Transbank's Webpay Plus REST API."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from parcelhub.core.config import settings
from parcelhub.core.exceptions import WebpayError

logger = logging.getLogger(__name__)

TRANSACTIONS_PATH = "/rswebpaytransaction/api/webpay/v1.2/transactions"

# Webpay answers AUTHORIZED with response_code 0 for approved payments
AUTHORIZED_STATUS = "AUTHORIZED"
APPROVED_RESPONSE_CODE = 0


@dataclass(frozen=True)
class WebpayTransaction:
    """Token and form URL the payer is redirected to."""

    token: str
    url: str


@dataclass(frozen=True)
class WebpayCommitResult:
    """Outcome of committing a transaction."""

    status: str
    response_code: int | None
    amount: int | None
    buy_order: str | None
    session_id: str | None
    authorization_code: str | None
    card_number: str | None
    payment_type_code: str | None
    installments_number: int | None

    @property
    def approved(self) -> bool:
        """Whether Webpay authorized the payment."""
        return self.status == AUTHORIZED_STATUS and self.response_code == APPROVED_RESPONSE_CODE


class WebpayClient:
    """Typed, logged wrapper around the Webpay Plus transaction endpoints."""

    def __init__(
        self,
        base_url: str,
        commerce_code: str,
        api_key: str,
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Tbk-Api-Key-Id": commerce_code,
                "Tbk-Api-Key-Secret": api_key,
                "Content-Type": "application/json",
            },
        )

    def close(self) -> None:
        self._client.close()

    def create_transaction(
        self,
        *,
        buy_order: str,
        session_id: str,
        amount: int,
        return_url: str,
    ) -> WebpayTransaction:
        """Start a transaction and return the token and redirect URL."""
        payload = {
            "buy_order": buy_order,
            "session_id": session_id,
            "amount": amount,
            "return_url": return_url,
        }
        logger.info("Webpay create request for buy order %s (amount %s)", buy_order, amount)
        data = self._request("POST", TRANSACTIONS_PATH, json=payload)

        token = data.get("token")
        url = data.get("url")
        if not token or not url:
            raise WebpayError(
                "Webpay create response missing token or url",
                context={"buy_order": buy_order},
            )
        logger.info("Webpay transaction created for buy order %s", buy_order)
        return WebpayTransaction(token=token, url=url)

    def commit_transaction(self, token: str) -> WebpayCommitResult:
        """Commit (confirm) a transaction after the payer returns from Webpay."""
        logger.info("Webpay commit request")
        data = self._request("PUT", f"{TRANSACTIONS_PATH}/{token}")

        card_detail = data.get("card_detail") or {}
        result = WebpayCommitResult(
            status=data.get("status") or "",
            response_code=data.get("response_code"),
            amount=data.get("amount"),
            buy_order=data.get("buy_order"),
            session_id=data.get("session_id"),
            authorization_code=data.get("authorization_code"),
            card_number=card_detail.get("card_number"),
            payment_type_code=data.get("payment_type_code"),
            installments_number=data.get("installments_number"),
        )
        logger.info(
            "Webpay commit for buy order %s returned status=%s response_code=%s",
            result.buy_order,
            result.status,
            result.response_code,
        )
        return result

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Webpay %s %s failed: %s", method, path.split("/")[-1], exc)
            raise WebpayError("Could not reach the payment gateway") from exc

        if response.status_code >= 400:
            message = self._extract_error_message(response)
            logger.warning(
                "Webpay %s returned HTTP %s: %s", method, response.status_code, message
            )
            raise WebpayError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise WebpayError("Payment gateway returned an invalid response") from exc

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error_message"):
            return body["error_message"]
        return f"Payment gateway error (HTTP {response.status_code})"


def get_webpay_client():
    """Dependency providing a Webpay client configured from settings."""
    client = WebpayClient(
        base_url=settings.WEBPAY_BASE_URL,
        commerce_code=settings.WEBPAY_COMMERCE_CODE,
        api_key=settings.WEBPAY_API_KEY,
        timeout=settings.WEBPAY_TIMEOUT_SECONDS,
    )
    try:
        yield client
    finally:
        client.close()
