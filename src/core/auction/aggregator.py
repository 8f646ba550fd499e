"""활성 필터 집계: 전체 AND 판정 + 표시용 분류"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional

from .evaluator import PredicateEvaluator
from .filters import FilterDescriptor, FilterKey
from .models import AuctionItem
from .option_types import (
    CATEGORY_REFORGE,
    CATEGORY_SET_EFFECT,
    ERG,
    SPECIAL_MOD,
    OptionTypeRegistry,
)

logger = logging.getLogger(__name__)


class FilterCategory(str, Enum):
    BASIC = "기본"
    REFORGE = "세공"
    SET_EFFECT = "세트 효과"
    SPECIAL = "특수"


SPECIAL_FILTER_NAMES = frozenset({SPECIAL_MOD, ERG})
SPECIAL_FILTER_DISPLAY_NAMES = frozenset(
    {"특별개조 타입", "특별개조 단계", "에르그 등급", "에르그 레벨"}
)


def passes_all(
    evaluator: PredicateEvaluator,
    item: AuctionItem,
    filters: Iterable[FilterDescriptor],
) -> bool:
    """모든 필터 AND. 필터가 없으면 항상 True."""
    return all(evaluator.evaluate(item, f) for f in filters)


def categorize(
    filters: Iterable[FilterDescriptor],
    registry: Optional[OptionTypeRegistry] = None,
) -> dict[FilterCategory, list[FilterDescriptor]]:
    """필터를 표시 분류(기본/세공/세트 효과/특수)로 묶는다. 평가에는 영향 없음.

    분류 태그가 없는 필터는 레지스트리의 같은 이름 옵션 타입 태그를 따른다.
    """
    buckets: dict[FilterCategory, list[FilterDescriptor]] = {c: [] for c in FilterCategory}
    for flt in filters:
        tag = flt.category
        if tag is None and registry is not None:
            spec = registry.get(flt.name)
            tag = spec.category if spec else None

        if tag == CATEGORY_REFORGE:
            buckets[FilterCategory.REFORGE].append(flt)
        elif tag == CATEGORY_SET_EFFECT:
            buckets[FilterCategory.SET_EFFECT].append(flt)
        elif (
            flt.name in SPECIAL_FILTER_NAMES
            or flt.display_name in SPECIAL_FILTER_DISPLAY_NAMES
        ):
            buckets[FilterCategory.SPECIAL].append(flt)
        else:
            buckets[FilterCategory.BASIC].append(flt)
    return buckets


class ActiveFilterSet:
    """활성 필터 컬렉션.

    단일 값 kind는 이름으로, 다중 슬롯 kind는 (이름, 슬롯)으로 키를 잡는다.
    같은 키로 추가하면 이전 필터를 교체한다. 삽입 순서를 유지한다.
    """

    def __init__(
        self,
        evaluator: PredicateEvaluator,
        filters: Iterable[FilterDescriptor] = (),
    ) -> None:
        self._evaluator = evaluator
        self._filters: dict[FilterKey, FilterDescriptor] = {}
        for flt in filters:
            self.add(flt)

    def add(self, flt: FilterDescriptor) -> Optional[FilterDescriptor]:
        """필터 추가. 교체된 이전 필터를 반환 (없으면 None)."""
        previous = self._filters.pop(flt.key, None)
        self._filters[flt.key] = flt
        if previous is not None:
            logger.debug("Replaced filter %s (%s)", flt.key, flt.kind_name)
        return previous

    def remove(self, name: str, slot: Optional[int] = None) -> bool:
        return self._filters.pop((name, slot), None) is not None

    def remove_name(self, name: str) -> int:
        """이름이 같은 필터를 슬롯 구분 없이 모두 제거. 제거 수 반환."""
        keys = [k for k in self._filters if k[0] == name]
        for key in keys:
            del self._filters[key]
        return len(keys)

    def clear(self) -> None:
        self._filters.clear()

    @property
    def filters(self) -> list[FilterDescriptor]:
        """현재 필터 스냅샷 (반복 중 변경 방지용 복사본)."""
        return list(self._filters.values())

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[FilterDescriptor]:
        return iter(self.filters)

    def __contains__(self, key: object) -> bool:
        return key in self._filters

    def passes_all(self, item: AuctionItem) -> bool:
        return passes_all(self._evaluator, item, self.filters)

    def apply(self, items: Iterable[AuctionItem]) -> list[AuctionItem]:
        """통과한 아이템만, 원래 순서대로."""
        filters = self.filters
        if not filters:
            return list(items)
        return [item for item in items if passes_all(self._evaluator, item, filters)]

    def categorize(self) -> dict[FilterCategory, list[FilterDescriptor]]:
        return categorize(self.filters, self._evaluator.registry)
