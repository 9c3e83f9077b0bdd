"""設定モジュール — 環境変数・定数定義."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from order_history.exceptions import ConfigError

# --- 注文履歴ページ ---
ORDER_HISTORY_URL = "https://www.amazon.es/gp/css/order-history"
ITEMS_PER_PAGE = 10

# --- セレクタ ---
ORDERS_SELECTOR = (
    ".order .a-fixed-left-grid > .a-fixed-left-grid-inner"
    " > .a-fixed-left-grid-col.a-col-right"
)
ORDER_COUNT_SELECTOR = ".num-orders"
TITLE_SELECTOR = ".a-row > a"
PRICE_SELECTOR = ".a-row > span.a-size-small.a-color-price"

# --- User-Agent ---
PC_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# --- フィルタ (年単位) ---
DEFAULT_FILTERS = (
    "year-2020",
    "year-2019",
    "year-2018",
    "year-2017",
    "year-2016",
    "year-2015",
    "year-2014",
    "year-2013",
)

# --- リクエスト設定 ---
DEFAULT_MAX_WORKERS = 4
DEFAULT_TIMEOUT = 30.0  # 秒

# --- 出力 ---
JSON_OUTPUT_NAME = "output.json"
TSV_OUTPUT_NAME = "output.csv"

# --- ログ (実行ディレクトリ配下) ---
LOG_DIR_NAME = "logs"


@dataclass(frozen=True)
class Settings:
    """1 回の実行に必要な設定一式."""

    cookie: str
    filters: tuple[str, ...] = DEFAULT_FILTERS
    url: str = ORDER_HISTORY_URL
    output_dir: Path = Path(".")
    max_workers: int = DEFAULT_MAX_WORKERS
    timeout: float = DEFAULT_TIMEOUT
    fail_fast: bool = True

    @property
    def json_path(self) -> Path:
        return self.output_dir / JSON_OUTPUT_NAME

    @property
    def tsv_path(self) -> Path:
        return self.output_dir / TSV_OUTPUT_NAME


def _split_filters(raw: str) -> tuple[str, ...]:
    return tuple(f.strip() for f in raw.split(",") if f.strip())


def _positive_int(name: str, value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} は整数で指定してください: {value!r}") from e
    if number < 1:
        raise ConfigError(f"{name} は 1 以上で指定してください: {number}")
    return number


def _positive_float(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} は数値で指定してください: {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{name} は 0 より大きい値で指定してください: {number}")
    return number


def load_settings(
    filters: list[str] | None = None,
    output_dir: str | Path | None = None,
    max_workers: int | None = None,
    timeout: float | None = None,
    fail_fast: bool = True,
    env_file: Path | None = None,
) -> Settings:
    """環境変数 (.env) と引数から Settings を組み立てる.

    引数で指定された値は環境変数より優先する。

    Raises:
        ConfigError: Cookie 未設定、または数値設定が不正な場合
    """
    # .env は実行ディレクトリから親方向に探す
    load_dotenv(env_file or find_dotenv(usecwd=True))

    cookie = os.environ.get("ORDER_HISTORY_COOKIE", "").strip()
    if not cookie:
        raise ConfigError("ORDER_HISTORY_COOKIE が設定されていません")

    if filters:
        resolved_filters = tuple(filters)
    elif os.environ.get("ORDER_HISTORY_FILTERS"):
        resolved_filters = _split_filters(os.environ["ORDER_HISTORY_FILTERS"])
    else:
        resolved_filters = DEFAULT_FILTERS
    if not resolved_filters:
        raise ConfigError("フィルタが 1 件も指定されていません")

    if max_workers is None:
        max_workers = os.environ.get("ORDER_HISTORY_MAX_WORKERS", DEFAULT_MAX_WORKERS)
    if timeout is None:
        timeout = os.environ.get("ORDER_HISTORY_TIMEOUT", DEFAULT_TIMEOUT)
    if output_dir is None:
        output_dir = os.environ.get("ORDER_HISTORY_OUTPUT_DIR", ".")

    return Settings(
        cookie=cookie,
        filters=resolved_filters,
        url=os.environ.get("ORDER_HISTORY_URL", ORDER_HISTORY_URL),
        output_dir=Path(output_dir),
        max_workers=_positive_int("max_workers", max_workers),
        timeout=_positive_float("timeout", timeout),
        fail_fast=fail_fast,
    )
