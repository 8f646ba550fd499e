"""필터 디스크립터: 사용자가 설정한 조건 인스턴스

kind는 클래스 단위 태그로 고정되어 생성 후 바뀌지 않는다.
인식할 수 없는 kind는 UnknownFilter로 보존된다 (평가 시 통과).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional

from .numeric import parse_bound, parse_int_bound

logger = logging.getLogger(__name__)

MAX_SLOTS = 3


class FilterKind(str, Enum):
    RANGE = "range"
    SELECTION = "selection"
    ENCHANT = "enchant"
    REFORGE_STATUS = "reforge-status"
    REFORGE_OPTION = "reforge-option"
    ERG = "erg"
    SPECIAL_MOD_TYPE = "special-mod-type"
    SPECIAL_MOD_RANGE = "special-mod-range"
    SPECIAL_MOD_NONE = "special-mod-none"
    SET_EFFECT = "set-effect"


# 이전 UI 코드가 쓰던 표기
KIND_ALIASES: dict[str, FilterKind] = {"select": FilterKind.SELECTION}

FilterKey = tuple[str, Optional[int]]


@dataclass(frozen=True)
class ReforgeSlot:
    """세공 옵션 슬롯: 이름 검색어 + 레벨 범위"""

    name_query: str = ""
    min_level: Optional[int] = None
    max_level: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.name_query.strip()

    @property
    def lower(self) -> Optional[int]:
        return self.min_level

    @property
    def upper(self) -> Optional[int]:
        return self.max_level


@dataclass(frozen=True)
class SetEffectSlot:
    """세트 효과 슬롯: 이름 검색어 + 수치(value2) 범위"""

    name_query: str = ""
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return not self.name_query.strip()

    @property
    def lower(self) -> Optional[int]:
        return self.min_value

    @property
    def upper(self) -> Optional[int]:
        return self.max_value


@dataclass(frozen=True)
class FilterDescriptor:
    name: str
    display_name: Optional[str] = None
    category: Optional[str] = None  # "세공", "세트 효과" 등 표시 분류 태그

    kind: ClassVar[Optional[FilterKind]] = None
    multi_slot: ClassVar[bool] = False

    @property
    def key(self) -> FilterKey:
        """활성 필터 컬렉션 키. 단일 값 kind는 이름, 다중 슬롯 kind는 (이름, 슬롯)."""
        return (self.name, None)

    def params(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "kind": self.kind_name}
        if self.display_name:
            data["displayName"] = self.display_name
        if self.category:
            data["category"] = self.category
        data.update(self.params())
        return data

    @property
    def kind_name(self) -> str:
        return self.kind.value if self.kind else ""


@dataclass(frozen=True)
class RangeFilter(FilterDescriptor):
    field: str = "value"
    min: Optional[float] = None
    max: Optional[float] = None
    is_percent: bool = False

    kind: ClassVar[Optional[FilterKind]] = FilterKind.RANGE

    def params(self) -> dict[str, Any]:
        return {"field": self.field, "min": self.min, "max": self.max, "isPercent": self.is_percent}


@dataclass(frozen=True)
class SelectionFilter(FilterDescriptor):
    value: str = ""
    field: str = "value"

    kind: ClassVar[Optional[FilterKind]] = FilterKind.SELECTION

    def params(self) -> dict[str, Any]:
        return {"field": self.field, "value": self.value}


@dataclass(frozen=True)
class EnchantFilter(FilterDescriptor):
    prefix_query: Optional[str] = None
    suffix_query: Optional[str] = None

    kind: ClassVar[Optional[FilterKind]] = FilterKind.ENCHANT

    def params(self) -> dict[str, Any]:
        return {"prefixQuery": self.prefix_query, "suffixQuery": self.suffix_query}


@dataclass(frozen=True)
class ReforgeStatusFilter(FilterDescriptor):
    rank: Optional[int] = None
    line_count: Optional[int] = None

    kind: ClassVar[Optional[FilterKind]] = FilterKind.REFORGE_STATUS

    def params(self) -> dict[str, Any]:
        return {"rank": self.rank, "lineCount": self.line_count}


@dataclass(frozen=True)
class ReforgeOptionFilter(FilterDescriptor):
    slots: tuple[ReforgeSlot, ...] = ()
    slot: Optional[int] = None  # UI가 슬롯 단위로 편집할 때의 인덱스

    kind: ClassVar[Optional[FilterKind]] = FilterKind.REFORGE_OPTION
    multi_slot: ClassVar[bool] = True

    @property
    def key(self) -> FilterKey:
        return (self.name, self.slot)

    def params(self) -> dict[str, Any]:
        return {
            "slot": self.slot,
            "slots": [
                {"nameQuery": s.name_query, "minLevel": s.min_level, "maxLevel": s.max_level}
                for s in self.slots
            ],
        }


@dataclass(frozen=True)
class ErgFilter(FilterDescriptor):
    grade: Optional[str] = None
    min_level: Optional[int] = None
    max_level: Optional[int] = None

    kind: ClassVar[Optional[FilterKind]] = FilterKind.ERG

    def params(self) -> dict[str, Any]:
        return {"grade": self.grade, "minLevel": self.min_level, "maxLevel": self.max_level}


@dataclass(frozen=True)
class SpecialModTypeFilter(FilterDescriptor):
    mod_type: str = ""

    kind: ClassVar[Optional[FilterKind]] = FilterKind.SPECIAL_MOD_TYPE

    def params(self) -> dict[str, Any]:
        return {"modType": self.mod_type}


@dataclass(frozen=True)
class SpecialModRangeFilter(FilterDescriptor):
    mod_type: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    kind: ClassVar[Optional[FilterKind]] = FilterKind.SPECIAL_MOD_RANGE

    def params(self) -> dict[str, Any]:
        return {"modType": self.mod_type, "min": self.min, "max": self.max}


@dataclass(frozen=True)
class SpecialModNoneFilter(FilterDescriptor):
    kind: ClassVar[Optional[FilterKind]] = FilterKind.SPECIAL_MOD_NONE


@dataclass(frozen=True)
class SetEffectFilter(FilterDescriptor):
    slots: tuple[SetEffectSlot, ...] = ()
    slot: Optional[int] = None

    kind: ClassVar[Optional[FilterKind]] = FilterKind.SET_EFFECT
    multi_slot: ClassVar[bool] = True

    @property
    def key(self) -> FilterKey:
        return (self.name, self.slot)

    def params(self) -> dict[str, Any]:
        return {
            "slot": self.slot,
            "slots": [
                {"nameQuery": s.name_query, "minValue": s.min_value, "maxValue": s.max_value}
                for s in self.slots
            ],
        }


@dataclass(frozen=True)
class UnknownFilter(FilterDescriptor):
    """인식할 수 없는 kind. 원본 kind 문자열과 파라미터를 그대로 보존."""

    raw_kind: str = ""
    raw_params: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def kind_name(self) -> str:
        return self.raw_kind

    def params(self) -> dict[str, Any]:
        return dict(self.raw_params)


# ── 파싱 ──────────────────────────────────────────────────────


def _get(raw: dict[str, Any], camel: str, snake: Optional[str] = None) -> Any:
    if camel in raw:
        return raw[camel]
    if snake and snake in raw:
        return raw[snake]
    return None


def _text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw)
    return text if text.strip() else None


_TRUE_TEXTS = frozenset({"true", "1", "yes", "on"})


def _flag(raw: Any) -> bool:
    """불리언 파라미터. 문자열은 "true"/"1"/"yes"/"on"만 참."""
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUE_TEXTS
    return bool(raw)


def _parse_slots(raw_slots: Any, name: str, slot_type: type) -> list[Any]:
    """슬롯 목록. dict와 이미 만들어진 슬롯 인스턴스만 남긴다."""
    if not isinstance(raw_slots, (list, tuple)):
        return []
    slots = [s for s in raw_slots if isinstance(s, (dict, slot_type))]
    if len(slots) > MAX_SLOTS:
        logger.warning(
            "Filter %s has %d slots, keeping first %d", name, len(slots), MAX_SLOTS
        )
        slots = slots[:MAX_SLOTS]
    return slots


def parse_kind(raw_kind: Any) -> Optional[FilterKind]:
    """kind 문자열 → FilterKind. 인식 불가 시 None."""
    text = str(raw_kind or "").strip()
    if text in KIND_ALIASES:
        return KIND_ALIASES[text]
    try:
        return FilterKind(text)
    except ValueError:
        return None


def filter_from_dict(raw: dict[str, Any]) -> FilterDescriptor:
    """UI/API에서 받은 dict → FilterDescriptor.

    camelCase(prefixQuery)와 snake_case(prefix_query) 키 모두 허용.
    해석할 수 없는 경계값은 미설정(None)으로 취급한다.
    name 또는 kind가 없으면 ValueError.
    """
    name = _text(raw.get("name"))
    raw_kind = raw.get("kind", raw.get("type"))
    if name is None or not raw_kind:
        raise ValueError(f"filter requires name and kind: {raw!r}")

    common = {
        "name": name,
        "display_name": _text(_get(raw, "displayName", "display_name")),
        "category": _text(raw.get("category")),
    }
    kind = parse_kind(raw_kind)

    if kind is FilterKind.RANGE:
        return RangeFilter(
            **common,
            field=_text(raw.get("field")) or "value",
            min=parse_bound(raw.get("min")),
            max=parse_bound(raw.get("max")),
            is_percent=_flag(_get(raw, "isPercent", "is_percent")),
        )
    if kind is FilterKind.SELECTION:
        value = raw.get("value")
        return SelectionFilter(
            **common,
            field=_text(raw.get("field")) or "value",
            value="" if value is None else str(value),
        )
    if kind is FilterKind.ENCHANT:
        return EnchantFilter(
            **common,
            prefix_query=_text(_get(raw, "prefixQuery", "prefix_query")),
            suffix_query=_text(_get(raw, "suffixQuery", "suffix_query")),
        )
    if kind is FilterKind.REFORGE_STATUS:
        return ReforgeStatusFilter(
            **common,
            rank=parse_int_bound(raw.get("rank")),
            line_count=parse_int_bound(_get(raw, "lineCount", "line_count")),
        )
    if kind is FilterKind.REFORGE_OPTION:
        slots = tuple(
            s
            if isinstance(s, ReforgeSlot)
            else ReforgeSlot(
                name_query=str(_get(s, "nameQuery", "name_query") or ""),
                min_level=parse_int_bound(_get(s, "minLevel", "min_level")),
                max_level=parse_int_bound(_get(s, "maxLevel", "max_level")),
            )
            for s in _parse_slots(raw.get("slots"), name, ReforgeSlot)
        )
        return ReforgeOptionFilter(**common, slots=slots, slot=parse_int_bound(raw.get("slot")))
    if kind is FilterKind.ERG:
        return ErgFilter(
            **common,
            grade=_text(raw.get("grade")),
            min_level=parse_int_bound(_get(raw, "minLevel", "min_level")),
            max_level=parse_int_bound(_get(raw, "maxLevel", "max_level")),
        )
    if kind is FilterKind.SPECIAL_MOD_TYPE:
        return SpecialModTypeFilter(
            **common, mod_type=str(_get(raw, "modType", "mod_type") or "")
        )
    if kind is FilterKind.SPECIAL_MOD_RANGE:
        return SpecialModRangeFilter(
            **common,
            mod_type=_text(_get(raw, "modType", "mod_type")),
            min=parse_bound(raw.get("min")),
            max=parse_bound(raw.get("max")),
        )
    if kind is FilterKind.SPECIAL_MOD_NONE:
        return SpecialModNoneFilter(**common)
    if kind is FilterKind.SET_EFFECT:
        slots = tuple(
            s
            if isinstance(s, SetEffectSlot)
            else SetEffectSlot(
                name_query=str(_get(s, "nameQuery", "name_query") or ""),
                min_value=parse_int_bound(_get(s, "minValue", "min_value")),
                max_value=parse_int_bound(_get(s, "maxValue", "max_value")),
            )
            for s in _parse_slots(raw.get("slots"), name, SetEffectSlot)
        )
        return SetEffectFilter(**common, slots=slots, slot=parse_int_bound(raw.get("slot")))

    extras = {
        k: v
        for k, v in raw.items()
        if k not in ("name", "kind", "type", "displayName", "display_name", "category")
    }
    logger.debug("Unrecognised filter kind %r for %s", raw_kind, name)
    return UnknownFilter(**common, raw_kind=str(raw_kind), raw_params=extras)
