"""경매 필터 Service: 활성 필터 + 아이템 집합 + 지연 재평가

EventBus로 변경을 통지하고, 통지를 받아 재평가 패스를 예약한다.

- 트리거(필터 추가/수정/제거, 아이템 교체, 카테고리 변경)마다 패스 1회 예약
- 실행 중인 이벤트 루프가 있으면 call_later(defer), 없으면 즉시 실행
- 겹친 트리거는 취소/병합하지 않는다. 마지막으로 실행된 패스가 최종 결과
- 패스는 시작 시점의 필터 목록 스냅샷으로 전체 아이템을 다시 훑는다
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Optional

from src.config import settings
from src.core.auction import (
    ActiveFilterSet,
    AuctionItem,
    Facet,
    FacetExtractor,
    FilterCategory,
    FilterDescriptor,
    FilterKind,
    OptionTypeRegistry,
    PredicateEvaluator,
    build_filter,
    filter_from_dict,
    passes_all,
)
from src.core.event_bus import AuctionEvent, EventBus
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.services.metadata_service import MetadataCache

logger = get_logger(__name__)


class AuctionFilterService:
    """한 검색 세션의 필터 엔진 인스턴스"""

    SOURCE = "auction_filter_service"

    def __init__(
        self,
        event_bus: EventBus,
        registry: OptionTypeRegistry,
        evaluator: Optional[PredicateEvaluator] = None,
        metadata: Optional[MetadataCache] = None,
        defer_seconds: Optional[float] = None,
    ):
        self._bus = event_bus
        self._registry = registry
        self._evaluator = evaluator or PredicateEvaluator(registry)
        self._extractor = FacetExtractor(registry)
        self._metadata = metadata
        self._defer = (
            settings.filter_defer_seconds if defer_seconds is None else defer_seconds
        )

        self._active = ActiveFilterSet(self._evaluator)
        self._items: list[AuctionItem] = []
        self._visible: list[AuctionItem] = []
        self._category: Optional[str] = None
        self._facet_cache: Optional[list[Facet]] = None
        self._metadata_task: Optional[asyncio.Task] = None
        self._pass_no = 0
        self._register_event_handlers()

    def _register_event_handlers(self) -> None:
        """EventBus 구독"""
        self._bus.subscribe(EventTypes.FILTERS_CHANGED, self._on_filters_changed)
        self._bus.subscribe(EventTypes.CATEGORY_CHANGED, self._on_category_changed)
        self._bus.subscribe(EventTypes.ITEMS_REPLACED, self._on_items_replaced)

    def close(self) -> None:
        """구독 해제. 앱 종료/테스트 정리용."""
        self._bus.unsubscribe(EventTypes.FILTERS_CHANGED, self._on_filters_changed)
        self._bus.unsubscribe(EventTypes.CATEGORY_CHANGED, self._on_category_changed)
        self._bus.unsubscribe(EventTypes.ITEMS_REPLACED, self._on_items_replaced)

    # === 조회 ===

    @property
    def category(self) -> Optional[str]:
        return self._category

    @property
    def filters(self) -> list[FilterDescriptor]:
        return self._active.filters

    @property
    def items(self) -> list[AuctionItem]:
        return list(self._items)

    @property
    def visible_items(self) -> list[AuctionItem]:
        """마지막 패스 결과"""
        return list(self._visible)

    @property
    def pass_count(self) -> int:
        return self._pass_no

    def categorized_filters(self) -> dict[FilterCategory, list[FilterDescriptor]]:
        return self._active.categorize()

    def facets(self) -> list[Facet]:
        """현재 아이템 집합의 facet 목록. 카테고리 변경/아이템 교체 시 다시 만든다."""
        if self._facet_cache is None:
            self._facet_cache = self._extractor.distinct(self._items)
        return list(self._facet_cache)

    # === 변경 ===

    def add_filter(self, flt: FilterDescriptor | dict[str, Any]) -> FilterDescriptor:
        """필터 추가/수정. dict는 filter_from_dict로 파싱 (실패 시 ValueError)."""
        descriptor = flt if isinstance(flt, FilterDescriptor) else filter_from_dict(flt)
        self._active.add(descriptor)
        self._notify_filters_changed()
        return descriptor

    def add_filter_for_facet(
        self, facet: Facet, kind: Optional[FilterKind] = None, **params: Any
    ) -> FilterDescriptor:
        return self.add_filter(build_filter(facet, kind, **params))

    def remove_filter(self, name: str, slot: Optional[int] = None) -> bool:
        """필터 제거. slot 미지정이면 같은 이름의 모든 슬롯을 제거."""
        if slot is None:
            removed = self._active.remove_name(name) > 0
        else:
            removed = self._active.remove(name, slot)
        if removed:
            self._notify_filters_changed()
        return removed

    def clear_filters(self) -> None:
        if not len(self._active):
            return
        self._active.clear()
        self._notify_filters_changed()

    def set_items(self, items: Iterable[AuctionItem | dict[str, Any]]) -> None:
        """검색 결과 교체"""
        parsed = [
            item if isinstance(item, AuctionItem) else AuctionItem.from_dict(item)
            for item in items
        ]
        self._items = parsed
        self._bus.emit(
            AuctionEvent(
                event_type=EventTypes.ITEMS_REPLACED,
                data={"count": len(parsed)},
                source=self.SOURCE,
            )
        )

    def change_category(self, category: Optional[str]) -> None:
        self._bus.emit(
            AuctionEvent(
                event_type=EventTypes.CATEGORY_CHANGED,
                data={"category": category},
                source=self.SOURCE,
            )
        )

    def _notify_filters_changed(self) -> None:
        self._bus.emit(
            AuctionEvent(
                event_type=EventTypes.FILTERS_CHANGED,
                data={"filters": [f.to_dict() for f in self._active.filters]},
                source=self.SOURCE,
            )
        )

    # === 이벤트 핸들러 ===

    def _on_filters_changed(self, event: AuctionEvent) -> None:
        """다른 발행자가 보낸 필터 목록은 활성 집합을 통째로 교체한다."""
        if event.source != self.SOURCE:
            self._active.clear()
            for raw in event.data.get("filters", []):
                try:
                    self._active.add(filter_from_dict(raw))
                except ValueError as e:
                    logger.warning("Ignoring malformed filter from %s: %s", event.source, e)
        self._schedule_pass()

    def _on_items_replaced(self, event: AuctionEvent) -> None:
        self._facet_cache = None
        self._schedule_pass()

    def _on_category_changed(self, event: AuctionEvent) -> None:
        category = event.data.get("category")
        logger.info("Category changed: %s -> %s", self._category, category)
        self._category = category
        self._active.clear()
        self._facet_cache = None
        self._load_category_metadata(category)
        self._schedule_pass()

    def _load_category_metadata(self, category: Optional[str]) -> None:
        if self._metadata is None or not category:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, skipping metadata preload for %s", category)
            return
        self._metadata_task = self._metadata.prefetch(category)

    # === 재평가 패스 ===

    def _schedule_pass(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._run_pass()
            return
        loop.call_later(self._defer, self._run_pass)

    def _run_pass(self) -> None:
        filters = self._active.filters
        items = list(self._items)
        if filters:
            visible = [
                item for item in items if passes_all(self._evaluator, item, filters)
            ]
        else:
            visible = items
        self._visible = visible
        self._pass_no += 1
        logger.debug(
            "Filter pass #%d: %d/%d items (filters=%d)",
            self._pass_no,
            len(visible),
            len(items),
            len(filters),
        )
        self._bus.emit(
            AuctionEvent(
                event_type=EventTypes.FILTER_PASS_COMPLETED,
                data={
                    "total": len(items),
                    "matched": len(visible),
                    "pass_no": self._pass_no,
                },
                source=self.SOURCE,
            )
        )
