"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class OrderRecord:
    """注文履歴の1商品を表す."""

    title: str  # 商品名
    price: str  # 表示どおりの価格 (例: "12,99")。数値には変換しない


@dataclass
class FilterOutcome:
    """1 フィルタ分の取得結果."""

    order_filter: str  # 例: year-2020
    orders: list[OrderRecord | None] = field(default_factory=list)  # None = 価格不正の行
    error: Exception | None = None  # None = 成功

    @property
    def ok(self) -> bool:
        return self.error is None
