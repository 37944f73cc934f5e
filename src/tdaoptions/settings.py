from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, ConfigDict, Field
import os
import yaml

from tdaoptions.exchanges.tdameritrade import BASE
from tdaoptions.strategies.options import STRIKE_DATE, STRIKE_PRICE_DELTA


class AccountCfg(BaseModel):
    # YAML 에서 따옴표 없이 쓴 숫자 계좌번호도 허용
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str | None = None
    access_token: str | None = None


class ExchangeCfg(BaseModel):
    base_url: str = BASE
    timeout_s: int = 10
    max_attempts: int = 3


class OrderCfg(BaseModel):
    strike_delta: float = STRIKE_PRICE_DELTA
    strike_date: str = STRIKE_DATE  # MMDDYY
    strike_steps: int = 1


class LoggingCfg(BaseModel):
    log_dir: str = "logs"
    filename: str = "orders.log"
    console_level: str = "INFO"
    file_level: str = "DEBUG"
    max_bytes: int = 5_000_000
    backup_count: int = 3
    levels: dict[str, str] = Field(
        default_factory=lambda: {"app": "INFO", "order": "INFO", "tda": "INFO"}
    )


class Settings(BaseSettings):
    env: str = "dev"
    account: AccountCfg = AccountCfg()
    exchange: ExchangeCfg = ExchangeCfg()
    order: OrderCfg = OrderCfg()
    logging: LoggingCfg = LoggingCfg()

    paper: bool = True
    live: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",  # 예: ACCOUNT__ID
    )

    @classmethod
    def load(cls, path: str | None = None):
        cfg: dict = {}
        if path:
            with open(path, "r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}

        # .env 오버레이: 환경변수 → YAML 설정에 주입
        acct = os.getenv("TDA_ACCOUNT_ID")
        token = os.getenv("TDA_ACCESS_TOKEN")
        if acct or token:
            cfg.setdefault("account", {})
            if acct:
                cfg["account"]["id"] = acct
            if token:
                cfg["account"]["access_token"] = token

        return cls.model_validate(cfg)

    def strategy_kwargs(self) -> dict:
        return self.order.model_dump()
