import json
from typing import Optional
import typer
from tdaoptions.app import run
from tdaoptions.settings import Settings
from tdaoptions.models.order import OptionsContract, TradeDirection, TradeRequest
from tdaoptions.strategies.options import build_order


app = typer.Typer(help="TD Ameritrade options order CLI")


def _request(
    ticker: str, price: float, qty: int, option_type: str, side: str
) -> TradeRequest:
    try:
        return TradeRequest(
            ticker=ticker,
            price=price,
            quantity=qty,
            option_type=OptionsContract(option_type.lower()),
            direction=TradeDirection(side.lower()),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.command()
def build(
    ticker: str = typer.Argument(..., help="예: AAPL"),
    price: float = typer.Option(..., help="지정가"),
    qty: int = typer.Option(1, help="계약 수"),
    option_type: str = typer.Option("call", "--type", help="call/put"),
    side: str = typer.Option("buy", help="buy/sell"),
    config: Optional[str] = typer.Option(None, help="YAML 설정 경로"),
) -> None:
    """주문 페이로드(JSON)만 출력. 네트워크 호출 없음."""
    s = Settings.load(config)
    body = build_order(
        _request(ticker, price, qty, option_type, side), **s.strategy_kwargs()
    )
    typer.echo(json.dumps(body.to_dict(), indent=2))


@app.command()
def place(
    ticker: str = typer.Argument(..., help="예: AAPL"),
    price: float = typer.Option(..., help="지정가"),
    qty: int = typer.Option(1, help="계약 수"),
    option_type: str = typer.Option("call", "--type", help="call/put"),
    side: str = typer.Option("buy", help="buy/sell"),
    config: str = typer.Option("configs/dev.yaml", help="YAML 설정 경로"),
) -> None:
    """
    주문 전송. settings의 live=true, paper=false 일 때만 실제로 POST 한다.
    """
    body = run(config, _request(ticker, price, qty, option_type, side))
    typer.echo(json.dumps(body))


if __name__ == "__main__":
    app()
