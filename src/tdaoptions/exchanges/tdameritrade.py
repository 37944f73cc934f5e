# src/tdaoptions/exchanges/tdameritrade.py
from __future__ import annotations
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass
import time
import logging
import requests

from tdaoptions.models.order import PlaceOrderBody

log = logging.getLogger("tda")

BASE = "https://api.tdameritrade.com/v1"

RETRYABLE_STATUS = {408, 429}


class OrderSubmitError(RuntimeError):
    """전송 계층 실패(연결/타임아웃)가 재시도 후에도 해소되지 않음"""


@dataclass
class TDACreds:
    access_token: str

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


def _is_retryable(status: int) -> bool:
    return status in RETRYABLE_STATUS or 500 <= status < 600


class TDAClient:
    """TD Ameritrade 주문 API (단일 POST + 지수 백오프 재시도)"""

    def __init__(
        self,
        base_url: str = BASE,
        timeout: int = 10,
        max_attempts: int = 3,
        session: Optional[requests.Session] = None,
    ):
        self.base = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self._owns_session = session is None
        self.s = session or requests.Session()

    def orders_url(self, account_id: str) -> str:
        return f"{self.base}/accounts/{account_id}/orders"

    def _post(
        self, url: str, body: Dict[str, Any], headers: Dict[str, str]
    ) -> requests.Response:
        # 408/429/5xx + 연결 오류: 간단 백오프
        backoff = 0.5
        for attempt in range(1, self.max_attempts + 1):
            last = attempt == self.max_attempts
            try:
                r = self.s.post(url, json=body, headers=headers, timeout=self.timeout)
            except (requests.ConnectionError, requests.Timeout) as e:
                if last:
                    raise OrderSubmitError(
                        f"POST {url} failed after {attempt} attempts: {e}"
                    ) from e
                log.warning(
                    f"POST {url} transport error ({e}), retrying in {backoff:.1f}s..."
                )
            except requests.RequestException as e:
                # 재시도 대상이 아닌 전송 오류 (ChunkedEncodingError 등)
                raise OrderSubmitError(f"POST {url} failed: {e}") from e
            else:
                if last or not _is_retryable(r.status_code):
                    return r
                log.warning(
                    f"POST {url} failed (status={r.status_code}), retrying in {backoff:.1f}s..."
                )
            time.sleep(backoff)
            backoff = min(backoff * 2, 8.0)
        raise OrderSubmitError(f"POST {url} failed after retries")

    def place_order(
        self,
        account_id: str,
        payload: Union[PlaceOrderBody, Dict[str, Any]],
        headers: Dict[str, str],
    ) -> bool:
        """
        주문 전송. 응답 상태/본문은 확인하지 않는다:
          - 요청이 완료되면 항상 True (브로커 거절 4xx/5xx 포함)
          - 거절 응답은 WARNING 로그로만 남긴다
        """
        body = payload.to_dict() if isinstance(payload, PlaceOrderBody) else payload
        url = self.orders_url(account_id)
        r = self._post(url, body, headers)
        if r.status_code >= 400:
            log.warning(
                "Order POST returned status=%s (treated as submitted): %s",
                r.status_code,
                r.text[:200],
            )
        else:
            log.info("Order submitted to account %s (status=%s)", account_id, r.status_code)
        return True

    def close(self) -> None:
        # 외부에서 주입한 세션은 호출자가 닫는다
        if self._owns_session:
            self.s.close()


def place_order(
    payload: Union[PlaceOrderBody, Dict[str, Any]],
    account_id: str,
    headers: Dict[str, str],
    **client_kwargs: Any,
) -> bool:
    # 호출마다 새 클라이언트 (장기 실행 데몬이라면 재사용하도록 바꿀 것)
    client = TDAClient(**client_kwargs)
    try:
        return client.place_order(account_id, payload, headers)
    finally:
        client.close()
