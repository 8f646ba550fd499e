"""EventBus: 필터 엔진 알림 채널

"활성 필터 변경", "카테고리 변경" 같은 통지를 동기 콜백으로 전달한다.

규칙:
- 핸들러는 발행자와 같은 스레드에서 즉시 호출된다
- 페이로드는 가벼운 값(dict/list/str)만 담는다
- 전파 깊이 최대 MAX_DEPTH 단계
- 하나의 전파 체인 안에서 같은 source의 같은 이벤트 재발행 금지
- 최상위 emit이 끝나면 체인 추적을 초기화한다
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Set

from src.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # 한 전파 체인의 최대 깊이


@dataclass
class AuctionEvent:
    """경매 필터 이벤트

    Args:
        event_type: EventTypes 상수 (예: "auction_filters_changed")
        data: 페이로드 (필터 dict 목록, 카테고리 ID 등)
        source: 발행한 서비스/컴포넌트 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    _depth: int = field(default=0, repr=False)

    @property
    def depth(self) -> int:
        return self._depth


EventHandler = Callable[[AuctionEvent], None]


class EventBus:
    """동기식 이벤트 버스 (필터 엔진 인스턴스마다 하나)

    사용 패턴:
        bus = EventBus()
        bus.subscribe(EventTypes.FILTERS_CHANGED, service.handle_filters_changed)
        bus.emit(AuctionEvent(EventTypes.FILTERS_CHANGED, {"filters": [...]}, "ui"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._active_depth: int = 0
        self._chain_keys: Set[str] = set()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("EventBus subscribe: %s -> %s", event_type, handler.__qualname__)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug(
                "EventBus unsubscribe: %s -> %s", event_type, handler.__qualname__
            )
            return
        logger.warning(
            "EventBus handler not registered: %s -> %s",
            event_type,
            handler.__qualname__,
        )

    def emit(self, event: AuctionEvent) -> None:
        """이벤트 발행. 등록된 핸들러를 등록 순서대로 호출.

        핸들러 예외는 로그만 남기고 다음 핸들러로 진행한다.
        """
        if self._active_depth >= MAX_DEPTH:
            logger.warning(
                "EventBus depth limit (%d) reached, dropping %s:%s",
                MAX_DEPTH,
                event.source,
                event.event_type,
            )
            return

        chain_key = f"{event.source}:{event.event_type}"
        if chain_key in self._chain_keys:
            logger.warning("EventBus duplicate in chain dropped: %s", chain_key)
            return

        self._chain_keys.add(chain_key)
        event._depth = self._active_depth

        self._active_depth += 1
        try:
            handlers = list(self._handlers.get(event.event_type, []))
            if not handlers:
                logger.debug("EventBus: no subscribers for %s", event.event_type)
            else:
                logger.debug(
                    "EventBus emit: %s (source=%s, depth=%d, handlers=%d)",
                    event.event_type,
                    event.source,
                    event._depth,
                    len(handlers),
                )
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "EventBus handler error: %s (event=%s)",
                        handler.__qualname__,
                        event.event_type,
                    )
        finally:
            self._active_depth -= 1
            if self._active_depth == 0:
                self._chain_keys.clear()

    def reset_chain(self) -> None:
        """중복 추적 강제 초기화."""
        self._chain_keys.clear()
        self._active_depth = 0

    def clear(self) -> None:
        """구독 + 체인 상태 전부 초기화 (앱 종료, 테스트)"""
        self._handlers.clear()
        self.reset_chain()

    def subscriber_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    @property
    def handler_count(self) -> int:
        """전체 이벤트 유형에 걸친 구독 수"""
        return sum(len(h) for h in self._handlers.values())
