from __future__ import annotations
import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from tdaoptions.models.order import (
    OptionsInstrument,
    OrderLeg,
    PlaceOrderBody,
    TradeDirection,
    TradeRequest,
)

log = logging.getLogger("order")

STRIKE_PRICE_DELTA = 2.5
STRIKE_DATE = "090122"  # MMDDYY

I32_MIN, I32_MAX = -(2**31), 2**31 - 1


class OptionsOrderStrategy:
    """단일 레그 옵션 주문 페이로드 생성기"""

    def __init__(
        self,
        request: TradeRequest,
        strike_delta: float = STRIKE_PRICE_DELTA,
        strike_date: str = STRIKE_DATE,
        strike_steps: int = 1,
    ):
        self.request = request
        self.strike_delta = strike_delta
        self._strike_date = strike_date
        self.strike_steps = strike_steps

    def build_order(self) -> PlaceOrderBody:
        leg = OrderLeg(
            instruction=self.order_instruction(),
            quantity=self.request.quantity,
            instrument=OptionsInstrument(symbol=self.options_contract_id()),
        )
        return PlaceOrderBody(price=self.request.price, order_leg_collection=(leg,))

    def order_instruction(self) -> str:
        if self.request.direction is TradeDirection.BUY:
            return "BUY_TO_OPEN"
        return "SELL_TO_CLOSE"

    def options_contract_id(self) -> str:
        # e.g. AAPL_090122C2
        return (
            f"{self.request.ticker}_{self.strike_date()}"
            f"{self.request.option_type.letter}{self.strike_price()}"
        )

    def strike_price(self) -> int:
        # TODO derive from the underlying close in 2.5 increments (close - close % 2.5 - 2.5)
        price = self.request.price
        # NaN -> 0, ±inf 및 범위 초과 -> 32비트 정수 한계로 포화
        if math.isnan(price):
            return 0
        if math.isinf(price):
            return I32_MAX if price > 0 else I32_MIN
        delta = Decimal(str(self.strike_price_delta())) * self.strike_steps
        strike = Decimal(str(price)) - delta
        if strike >= I32_MAX:
            return I32_MAX
        if strike <= I32_MIN:
            return I32_MIN
        return int(strike.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    # TODO the delta will need to be determined per ticker
    def strike_price_delta(self) -> float:
        return self.strike_delta

    # TODO compute from the current date plus a configured offset
    def strike_date(self) -> str:
        return self._strike_date


def build_order(request: TradeRequest, **kwargs: Any) -> PlaceOrderBody:
    body = OptionsOrderStrategy(request, **kwargs).build_order()
    log.debug(
        "Built %s order %s x%d @ %s",
        body.order_leg_collection[0].instruction,
        body.order_leg_collection[0].instrument.symbol,
        request.quantity,
        request.price,
    )
    return body
