"""注文履歴ページのスクレイピングモジュール.

取得戦略:
  1. 1 ページ目を取得し、注文件数からページ数を算出
  2. 残りのページをワーカープールで並行取得
  3. 各ページの注文行から商品名・価格を抽出
"""

from __future__ import annotations

import logging
import math
import re
from concurrent.futures import Executor

import requests
from bs4 import BeautifulSoup

from order_history.config import (
    ITEMS_PER_PAGE,
    ORDER_COUNT_SELECTOR,
    ORDERS_SELECTOR,
    PC_USER_AGENT,
    PRICE_SELECTOR,
    TITLE_SELECTOR,
    Settings,
)
from order_history.exceptions import PageCountUnavailable, TransportFailure
from order_history.models import OrderRecord

logger = logging.getLogger(__name__)

# 先頭の整数部分 ("25" / "1.234" → 1)
_INT_PREFIX_PATTERN = re.compile(r"[+-]?\d+")
# 先頭の浮動小数点数部分 ("12.99" / "1.234.56" → 1.234 / "Infinity")
_FLOAT_PREFIX_PATTERN = re.compile(
    r"[+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)


def fetch_page(settings: Settings, order_filter: str, page_index: int) -> str:
    """注文履歴ページの HTML を取得する.

    Args:
        settings: 実行設定 (Cookie・URL・タイムアウト)
        order_filter: 期間フィルタ (例: "year-2020")
        page_index: 0 始まりのページ番号

    Returns:
        HTML 文字列

    Raises:
        TransportFailure: 通信失敗または非 2xx 応答の場合
    """
    logger.info("取得中: filter=%s, page=%d", order_filter, page_index)

    headers = {
        "Cookie": settings.cookie,
        "User-Agent": PC_USER_AGENT,
        "Accept-Language": "es-ES,es;q=0.9,en;q=0.8",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    params = {
        "orderFilter": order_filter,
        "startIndex": page_index * ITEMS_PER_PAGE,
    }

    try:
        resp = requests.get(
            settings.url, headers=headers, params=params, timeout=settings.timeout
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(
            "注文履歴ページ取得失敗: filter=%s, page=%d, error=%s",
            order_filter, page_index, e,
        )
        raise TransportFailure(order_filter, page_index, str(e)) from e

    logger.info("取得完了: filter=%s, page=%d", order_filter, page_index)
    return resp.text


def parse_page_count(html: str) -> int | None:
    """注文件数の表示からページ数を算出する.

    Returns:
        ページ数 (1 ページ 10 件で切り上げ)。件数が読めない・0 件なら None。
    """
    soup = BeautifulSoup(html, "html.parser")
    el = soup.select_one(ORDER_COUNT_SELECTOR)
    if el is None:
        return None

    tokens = el.get_text().split()
    if not tokens:
        return None

    m = _INT_PREFIX_PATTERN.match(tokens[0])
    if not m:
        return None

    count = int(m.group(0))
    if count <= 0:
        return None
    return math.ceil(count / ITEMS_PER_PAGE)


def parse_orders(html: str) -> list[OrderRecord | None]:
    """注文履歴 HTML から商品リストを抽出する.

    価格が読めない行は None のまま残す (呼び出し側で除去する)。
    """
    soup = BeautifulSoup(html, "html.parser")
    return [_parse_row(row) for row in soup.select(ORDERS_SELECTOR)]


def _parse_row(row) -> OrderRecord | None:
    """注文行 1 件を OrderRecord に変換する. 価格が不正なら None."""
    title_el = row.select_one(TITLE_SELECTOR)
    price_el = row.select_one(PRICE_SELECTOR)

    # "EUR 12,99" → 2 番目のトークンが価格
    price_tokens = price_el.get_text().split() if price_el is not None else []
    if len(price_tokens) < 2:
        return None

    price = price_tokens[1]
    if not _is_price(price):
        return None

    title = title_el.get_text().strip() if title_el is not None else ""
    return OrderRecord(title=title, price=price)


def _is_price(token: str) -> bool:
    """小数点のカンマをピリオドに置換し、先頭が数値として読めるか判定する."""
    return _FLOAT_PREFIX_PATTERN.match(token.replace(",", ".", 1)) is not None


def fetch_orders(
    settings: Settings, order_filter: str, executor: Executor
) -> list[OrderRecord | None]:
    """1 フィルタ分の全ページを取得し、商品リストを返す.

    HTTP リクエストはすべて executor 上で実行する。
    結果は完了順ではなくページ順に並べる。

    Raises:
        PageCountUnavailable: 1 ページ目から件数が読めない場合
        TransportFailure: いずれかのページ取得に失敗した場合
    """
    first_page = executor.submit(fetch_page, settings, order_filter, 0).result()

    page_count = parse_page_count(first_page)
    if not page_count:
        logger.error("ページ数を取得できません: filter=%s", order_filter)
        raise PageCountUnavailable(order_filter)

    logger.info("filter=%s: %d ページ", order_filter, page_count)

    futures = [
        executor.submit(fetch_page, settings, order_filter, page_index)
        for page_index in range(1, page_count)
    ]
    pages = [first_page] + [future.result() for future in futures]

    orders: list[OrderRecord | None] = []
    for html in pages:
        orders.extend(parse_orders(html))

    logger.info(
        "filter=%s: %d 件の商品を取得 (%d 行)",
        order_filter, sum(1 for o in orders if o), len(orders),
    )
    return orders
