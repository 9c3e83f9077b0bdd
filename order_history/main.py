"""注文履歴取得 — メインエントリーポイント.

処理フロー:
  1. 設定 (.env・引数) を読み込む
  2. フィルタごとに 1 ページ目から件数を取得し、全ページを並行取得
  3. 全フィルタの結果を結合し、空要素を除去
  4. output.json / output.csv に書き出す
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path

from order_history.config import LOG_DIR_NAME, Settings, load_settings
from order_history.exceptions import OrderHistoryError
from order_history.models import FilterOutcome
from order_history.output import clean_orders, write_json, write_tsv
from order_history.scraper import fetch_orders

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Path) -> None:
    """ロギングの初期設定.

    ログファイルを作れない場合は標準出力のみに出す。
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_error = None
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"collector_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as e:
        file_error = e

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
    if file_error is not None:
        logger.warning("ログファイルを作成できません。標準出力のみに出力します: %s", file_error)


def _collect_filter(
    settings: Settings, order_filter: str, page_pool: Executor
) -> FilterOutcome:
    """1 フィルタ分を取得する. fail_fast でなければ失敗を結果として返す."""
    try:
        orders = fetch_orders(settings, order_filter, page_pool)
    except OrderHistoryError as e:
        if settings.fail_fast:
            raise
        return FilterOutcome(order_filter=order_filter, error=e)
    return FilterOutcome(order_filter=order_filter, orders=orders)


def collect_orders(settings: Settings) -> list[FilterOutcome]:
    """全フィルタを並行取得する.

    HTTP リクエストは max_workers 本のページ用プールに限定される。
    結果は settings.filters の順に返す。
    """
    with ThreadPoolExecutor(
        max_workers=settings.max_workers, thread_name_prefix="page"
    ) as page_pool, ThreadPoolExecutor(
        max_workers=max(1, len(settings.filters)), thread_name_prefix="filter"
    ) as filter_pool:
        futures = [
            filter_pool.submit(_collect_filter, settings, order_filter, page_pool)
            for order_filter in settings.filters
        ]
        return [future.result() for future in futures]


def run(settings: Settings) -> int:
    """メイン処理.

    Returns:
        終了コード。全フィルタ成功なら 0。
    """
    logger.info("=== 注文履歴取得 開始 ===")
    logger.info("フィルタ: %s", ", ".join(settings.filters))
    start_time = time.time()

    try:
        outcomes = collect_orders(settings)

        failed = [o for o in outcomes if not o.ok]
        for outcome in failed:
            logger.error("取得失敗: filter=%s, error=%s", outcome.order_filter, outcome.error)

        orders = clean_orders(
            order for outcome in outcomes if outcome.ok for order in outcome.orders
        )

        settings.output_dir.mkdir(parents=True, exist_ok=True)
        write_json(settings.json_path, orders)
        write_tsv(settings.tsv_path, orders)
    except Exception:
        logger.exception("注文履歴取得に失敗しました")
        return 1

    # サマリ
    elapsed = time.time() - start_time
    logger.info("=== 注文履歴取得 完了 ===")
    logger.info("DONE! 商品: %d 件, 失敗フィルタ: %d 件, 所要時間: %.1f 秒",
                len(orders), len(failed), elapsed)
    return 1 if failed else 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="order-history",
        description="注文履歴から商品名・価格を取得し output.json / output.csv に書き出す",
    )
    parser.add_argument(
        "filters", nargs="*",
        help="期間フィルタ (例: year-2020)。省略時は ORDER_HISTORY_FILTERS または既定の年一覧",
    )
    parser.add_argument("--output-dir", help="出力ディレクトリ (既定: カレント)")
    parser.add_argument("--max-workers", type=int, help="同時リクエスト数の上限")
    parser.add_argument("--timeout", type=float, help="リクエストタイムアウト (秒)")
    parser.add_argument(
        "--keep-going", action="store_true",
        help="失敗したフィルタを飛ばし、取得できた分だけ書き出す",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(Path.cwd() / LOG_DIR_NAME)

    try:
        settings = load_settings(
            filters=args.filters,
            output_dir=args.output_dir,
            max_workers=args.max_workers,
            timeout=args.timeout,
            fail_fast=not args.keep_going,
        )
    except OrderHistoryError as e:
        logger.error("設定エラー: %s", e)
        return 2

    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
