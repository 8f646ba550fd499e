"""경매 아이템 도메인 모델 (렌더링/검색 API 무관)"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

OPTION_FIELDS = ("value", "value2", "sub_type", "desc")


def _as_text(raw: Any) -> Optional[str]:
    """JSON 값 → 텍스트. 숫자는 문자열로 보존, None은 그대로."""
    if raw is None:
        return None
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def _pick(raw: dict[str, Any], *keys: str) -> Any:
    """여러 키 표기(내부/camelCase/경매 API) 중 먼저 존재하는 값."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


@dataclass(frozen=True)
class ItemOption:
    """아이템 옵션 한 줄 (공격, 인챈트, 세공 옵션 등)."""

    option_type: str  # "공격", "인챈트", "세공 옵션", ...
    value: str = ""  # 주 값 (수치 텍스트 또는 자유 텍스트)
    value2: Optional[str] = None  # 보조 값 (범위 상한, 추가 수치)
    sub_type: Optional[str] = None  # 접두/접미, 에르그 등급, 특별 개조 타입
    desc: Optional[str] = None  # 인챈트 효과 목록

    def get_field(self, name: str) -> Optional[str]:
        """필드 선택자로 값 조회. "option_value2" 같은 경매 API 표기도 허용."""
        key = name[len("option_"):] if name.startswith("option_") else name
        if key == "subType":
            key = "sub_type"
        if key not in OPTION_FIELDS:
            return None
        return getattr(self, key)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ItemOption":
        option_type = _pick(raw, "type", "option_type")
        if not option_type:
            raise ValueError(f"option without type: {raw!r}")
        return cls(
            option_type=str(option_type),
            value=_as_text(_pick(raw, "value", "option_value")) or "",
            value2=_as_text(_pick(raw, "value2", "option_value2")),
            sub_type=_as_text(_pick(raw, "subType", "sub_type", "option_sub_type")),
            desc=_as_text(_pick(raw, "desc", "option_desc")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.option_type,
            "value": self.value,
            "value2": self.value2,
            "subType": self.sub_type,
            "desc": self.desc,
        }


@dataclass(frozen=True)
class AuctionItem:
    """경매 매물. 옵션은 타입별로 중복될 수 있다 (세공 옵션 최대 3줄 등)."""

    item_id: str
    display_name: str
    price: int = 0
    options: tuple[ItemOption, ...] = field(default_factory=tuple)

    def options_of_type(self, option_type: str) -> list[ItemOption]:
        return [o for o in self.options if o.option_type == option_type]

    def first_option(self, option_type: str) -> Optional[ItemOption]:
        for option in self.options:
            if option.option_type == option_type:
                return option
        return None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "AuctionItem":
        """검색 결과 레코드 → AuctionItem.

        내부 표기(id/displayName/price/options)와
        경매 API 표기(auction_item_no/item_name/auction_price_per_unit/item_option)
        모두 허용. 타입 없는 옵션은 버린다.
        """
        raw_options = _pick(raw, "options", "item_option") or []
        options: list[ItemOption] = []
        for raw_option in raw_options:
            if not isinstance(raw_option, dict):
                continue
            try:
                options.append(ItemOption.from_dict(raw_option))
            except ValueError:
                logger.debug("Skipping option without type on item %s", raw.get("id"))
                continue

        price = _pick(raw, "price", "auction_price_per_unit")
        try:
            price_value = int(price) if price is not None else 0
        except (TypeError, ValueError):
            price_value = 0

        return cls(
            item_id=str(_pick(raw, "id", "item_id", "auction_item_no") or ""),
            display_name=str(_pick(raw, "displayName", "display_name", "item_name") or ""),
            price=price_value,
            options=tuple(options),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.item_id,
            "displayName": self.display_name,
            "price": self.price,
            "options": [o.to_dict() for o in self.options],
        }
