"""옵션 타입 레지스트리: 옵션 타입 이름 → 필터 가능 facet 정의

Facet 추출기, 조건 평가기, 필터 분류가 같은 인스턴스를 주입받아 사용한다.
등록되지 않은 옵션 타입은 facet을 만들지 않으며 필터링할 수 없다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .filters import FilterKind

logger = logging.getLogger(__name__)

# 옵션 타입 이름 (경매 API 어휘)
ATTACK = "공격"
DURABILITY = "내구력"
BALANCE = "밸런스"
PIERCE_LEVEL = "피어싱 레벨"
ENCHANT = "인챈트"
SPECIAL_MOD = "특별 개조"
ERG = "에르그"
REFORGE_RANK = "세공 랭크"
REFORGE_OPTION = "세공 옵션"
SET_EFFECT = "세트 효과"

ENCHANT_PREFIX = "접두"
ENCHANT_SUFFIX = "접미"

CATEGORY_REFORGE = "세공"
CATEGORY_SET_EFFECT = "세트 효과"


class FacetKind(str, Enum):
    RANGE = "range"
    ENCHANT = "enchant"
    SPECIAL_MOD = "special-mod"
    ERG = "erg"
    REFORGE_STATUS = "reforge-status"
    REFORGE_OPTION = "reforge-option"
    SET_EFFECT = "set-effect"


class ValueRule(str, Enum):
    FIELD = "field"  # 필드 값을 그대로 사용
    PIERCE_LEVEL = "pierce-level"  # value + value2의 "+N"


FACET_FILTER_KINDS: dict[FacetKind, tuple[FilterKind, ...]] = {
    FacetKind.RANGE: (FilterKind.RANGE, FilterKind.SELECTION),
    FacetKind.ENCHANT: (FilterKind.ENCHANT,),
    FacetKind.SPECIAL_MOD: (
        FilterKind.SPECIAL_MOD_TYPE,
        FilterKind.SPECIAL_MOD_RANGE,
        FilterKind.SPECIAL_MOD_NONE,
    ),
    FacetKind.ERG: (FilterKind.ERG,),
    FacetKind.REFORGE_STATUS: (FilterKind.REFORGE_STATUS,),
    FacetKind.REFORGE_OPTION: (FilterKind.REFORGE_OPTION,),
    FacetKind.SET_EFFECT: (FilterKind.SET_EFFECT,),
}


@dataclass(frozen=True)
class OptionTypeSpec:
    """옵션 타입 한 개의 필터 정의 (불변)."""

    name: str  # 옵션 타입 (Option.type과 일치)
    display_name: str
    kind: FacetKind
    field: str = "value"
    is_percent: bool = False
    sub_types: tuple[str, ...] = ()
    value_rule: ValueRule = ValueRule.FIELD
    category: Optional[str] = None

    @property
    def filter_kinds(self) -> tuple[FilterKind, ...]:
        return FACET_FILTER_KINDS[self.kind]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "kind": self.kind.value,
            "field": self.field,
            "isPercent": self.is_percent,
            "subTypes": list(self.sub_types),
            "category": self.category,
            "filterKinds": [k.value for k in self.filter_kinds],
        }


DEFAULT_OPTION_TYPES: tuple[OptionTypeSpec, ...] = (
    OptionTypeSpec(ATTACK, "최대 공격력", FacetKind.RANGE, field="value2"),
    OptionTypeSpec(DURABILITY, "최대 내구력", FacetKind.RANGE, field="value2"),
    OptionTypeSpec(BALANCE, "밸런스", FacetKind.RANGE, is_percent=True),
    OptionTypeSpec("방어력", "방어력", FacetKind.RANGE),
    OptionTypeSpec("보호", "보호", FacetKind.RANGE),
    OptionTypeSpec("마법 방어력", "마법 방어력", FacetKind.RANGE),
    OptionTypeSpec("마법 보호", "마법 보호", FacetKind.RANGE),
    OptionTypeSpec("남은 전용 해제 가능 횟수", "전용 해제 가능 횟수", FacetKind.RANGE),
    OptionTypeSpec(
        PIERCE_LEVEL, "피어싱 레벨", FacetKind.RANGE, value_rule=ValueRule.PIERCE_LEVEL
    ),
    OptionTypeSpec(
        ENCHANT,
        "인챈트",
        FacetKind.ENCHANT,
        sub_types=(ENCHANT_PREFIX, ENCHANT_SUFFIX),
    ),
    OptionTypeSpec(SPECIAL_MOD, "특별개조 단계", FacetKind.SPECIAL_MOD),
    OptionTypeSpec(ERG, "에르그 레벨", FacetKind.ERG),
    OptionTypeSpec(
        REFORGE_RANK, "세공 상태", FacetKind.REFORGE_STATUS, category=CATEGORY_REFORGE
    ),
    OptionTypeSpec(
        REFORGE_OPTION, "세공 옵션", FacetKind.REFORGE_OPTION, category=CATEGORY_REFORGE
    ),
    OptionTypeSpec(
        SET_EFFECT,
        "세트 효과",
        FacetKind.SET_EFFECT,
        field="value2",
        category=CATEGORY_SET_EFFECT,
    ),
)


class OptionTypeRegistry:
    """옵션 타입 정의 저장소. 조회 전용으로 사용한다."""

    def __init__(self, specs: Iterable[OptionTypeSpec] = ()) -> None:
        self._specs: dict[str, OptionTypeSpec] = {}
        for spec in specs:
            self.register(spec)

    @classmethod
    def default(cls) -> "OptionTypeRegistry":
        return cls(DEFAULT_OPTION_TYPES)

    def register(self, spec: OptionTypeSpec) -> None:
        """정의 등록. 같은 이름이면 경고 로그 후 덮어쓴다."""
        if spec.name in self._specs:
            logger.warning("Overwriting option type: %s", spec.name)
        self._specs[spec.name] = spec

    def get(self, name: str) -> Optional[OptionTypeSpec]:
        return self._specs.get(name)

    def get_all(self) -> list[OptionTypeSpec]:
        return list(self._specs.values())

    def names(self) -> list[str]:
        return list(self._specs)

    def count(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs
