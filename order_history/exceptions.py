"""注文履歴取得で発生する例外."""


class OrderHistoryError(Exception):
    """注文履歴取得の基底例外."""


class ConfigError(OrderHistoryError):
    """設定値が不足・不正."""


class TransportFailure(OrderHistoryError):
    """ページ取得時の HTTP エラー (通信失敗・非 2xx)."""

    def __init__(self, order_filter: str, page_index: int, reason: str):
        self.order_filter = order_filter
        self.page_index = page_index
        super().__init__(
            f"ページ取得失敗: filter={order_filter}, page={page_index}, error={reason}"
        )


class PageCountUnavailable(OrderHistoryError):
    """注文件数の要素が見つからず、ページ数を決定できない."""

    def __init__(self, order_filter: str):
        self.order_filter = order_filter
        super().__init__(f"ページ数を取得できません: filter={order_filter}")
