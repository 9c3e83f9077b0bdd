"""テスト共通のフィクスチャ."""

from pathlib import Path

import pytest

from order_history.config import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_ROW_TEMPLATE = """
<div class="order">
  <div class="a-fixed-left-grid">
    <div class="a-fixed-left-grid-inner">
      <div class="a-fixed-left-grid-col a-col-right">
        <div class="a-row"><a href="/gp/product/X">{title}</a></div>
        <div class="a-row"><span class="a-size-small a-color-price">{price}</span></div>
      </div>
    </div>
  </div>
</div>
"""


def build_page(count_text: str | None, rows: list[tuple[str, str]]) -> str:
    """件数表示と (title, price) 行から注文履歴ページの HTML を組み立てる."""
    count = f'<span class="num-orders">{count_text}</span>' if count_text is not None else ""
    body = "".join(_ROW_TEMPLATE.format(title=t, price=p) for t, p in rows)
    return f"<html><body>{count}{body}</body></html>"


@pytest.fixture
def page_builder():
    return build_page


@pytest.fixture
def load_fixture():
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        cookie="session-id=123-4567890; ubid-acbes=000",
        filters=("year-2020",),
        output_dir=tmp_path,
        max_workers=2,
        timeout=5.0,
    )
