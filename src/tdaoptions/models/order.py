from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class TradeDirection(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OptionsContract(str, Enum):
    CALL = "call"
    PUT = "put"

    @property
    def letter(self) -> str:
        return "C" if self is OptionsContract.CALL else "P"


@dataclass(frozen=True)
class TradeRequest:
    ticker: str
    price: float
    quantity: int
    option_type: OptionsContract
    direction: TradeDirection

    @classmethod
    def call(cls, ticker: str, price: float, quantity: int, direction: str = "buy"):
        return cls(
            ticker=ticker,
            price=price,
            quantity=quantity,
            option_type=OptionsContract.CALL,
            direction=TradeDirection(direction),
        )

    @classmethod
    def put(cls, ticker: str, price: float, quantity: int, direction: str = "buy"):
        return cls(
            ticker=ticker,
            price=price,
            quantity=quantity,
            option_type=OptionsContract.PUT,
            direction=TradeDirection(direction),
        )


@dataclass(frozen=True)
class OptionsInstrument:
    symbol: str
    asset_type: str = "OPTION"

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "assetType": self.asset_type}


@dataclass(frozen=True)
class OrderLeg:
    instruction: str  # "BUY_TO_OPEN" | "SELL_TO_CLOSE"
    quantity: int
    instrument: OptionsInstrument

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instruction": self.instruction,
            "quantity": self.quantity,
            "instrument": self.instrument.to_dict(),
        }


@dataclass(frozen=True)
class PlaceOrderBody:
    """
    Body of POST /accounts/{accountId}/orders.
    https://developer.tdameritrade.com/account-access/apis/post/accounts/%7BaccountId%7D/orders-0
    """

    price: float
    order_leg_collection: Tuple[OrderLeg, ...] = ()
    complex_order_strategy_type: str = "NONE"
    order_type: str = "LIMIT"
    session: str = "NORMAL"
    duration: str = "DAY"
    order_strategy_type: str = "SINGLE"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "complexOrderStrategyType": self.complex_order_strategy_type,
            "orderType": self.order_type,
            "session": self.session,
            "price": self.price,
            "duration": self.duration,
            "orderStrategyType": self.order_strategy_type,
            "orderLegCollection": [leg.to_dict() for leg in self.order_leg_collection],
        }
