"""取得結果のファイル出力モジュール.

output.json (インデント付き JSON) と output.csv (タブ区切り) を書き出す。
既存ファイルは上書きする。
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterable
from dataclasses import asdict, fields
from pathlib import Path

from order_history.models import OrderRecord

logger = logging.getLogger(__name__)

FIELDNAMES = [f.name for f in fields(OrderRecord)]


def clean_orders(items: Iterable[OrderRecord | None]) -> list[OrderRecord]:
    """None などの空要素を取り除く."""
    return [item for item in items if item]


def write_json(path: Path, orders: list[OrderRecord]) -> None:
    """商品リストをインデント付き JSON で書き出す.

    Args:
        path: 出力先
        orders: [OrderRecord(title, price), ...]
    """
    with open(path, "w", encoding="utf-8") as f:
        json.dump([asdict(o) for o in orders], f, indent=2, ensure_ascii=False)
    logger.info("%s に %d 件書き込み", path, len(orders))


def write_tsv(path: Path, orders: list[OrderRecord]) -> None:
    """商品リストをタブ区切りで書き出す. 1 行目はヘッダ (title, price)."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES, delimiter="\t")
        writer.writeheader()
        for order in orders:
            writer.writerow(asdict(order))
    logger.info("%s に %d 件書き込み", path, len(orders))
