# examples/place_call_example.py
# ------------------------------------------------------------
# AAPL 콜 매수 주문 페이로드를 만들고, 환경변수가 있으면 실제로 전송
#   TDA_ACCOUNT_ID, TDA_ACCESS_TOKEN
# ------------------------------------------------------------
import json
import os

from tdaoptions.exchanges.tdameritrade import TDACreds, place_order
from tdaoptions.logging_config import setup as setup_logging
from tdaoptions.models.order import TradeRequest
from tdaoptions.strategies.options import build_order


def main():
    setup_logging()
    body = build_order(TradeRequest.call("AAPL", 4.5, 1, "buy"))
    print(json.dumps(body.to_dict(), indent=2))

    account = os.getenv("TDA_ACCOUNT_ID")
    token = os.getenv("TDA_ACCESS_TOKEN")
    if not (account and token):
        print("TDA_ACCOUNT_ID/TDA_ACCESS_TOKEN not set; skipping submit")
        return
    place_order(body, account, TDACreds(token).auth_headers())


if __name__ == "__main__":
    main()
