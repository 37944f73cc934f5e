from __future__ import annotations
import json
import logging

from tdaoptions.settings import Settings
from tdaoptions.logging_config import setup as setup_logging
from tdaoptions.models.order import TradeRequest
from tdaoptions.strategies.options import build_order
from tdaoptions.exchanges.tdameritrade import TDACreds, place_order

log = logging.getLogger("app")


def resolve_live(s: Settings) -> bool:
    if s.live and s.paper:
        log.warning("paper=True 이므로 실거래가 비활성화됩니다 (live 플래그 무시).")
        return False
    if s.live and not s.account.access_token:
        log.error("live=True지만 access token이 없습니다. DRY-RUN으로 강등합니다.")
        return False
    return s.live


def run(config_path: str | None, request: TradeRequest) -> dict:
    s = Settings.load(config_path)
    setup_logging(s.logging)

    body = build_order(request, **s.strategy_kwargs()).to_dict()

    if not resolve_live(s):
        log.info("DRY-RUN: order not sent: %s", json.dumps(body))
        return body

    if not s.account.id:
        raise ValueError("account id is required to place a live order")

    creds = TDACreds(access_token=str(s.account.access_token))
    place_order(
        body,
        s.account.id,
        creds.auth_headers(),
        base_url=s.exchange.base_url,
        timeout=s.exchange.timeout_s,
        max_attempts=s.exchange.max_attempts,
    )
    log.info(
        f"[{s.env}] {body['orderLegCollection'][0]['instruction']} "
        f"{request.quantity} {body['orderLegCollection'][0]['instrument']['symbol']} @ {request.price}"
    )
    return body
