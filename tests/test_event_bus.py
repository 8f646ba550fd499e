"""EventBus 테스트"""

from src.core.event_bus import MAX_DEPTH, AuctionEvent, EventBus
from src.core.event_types import EventTypes


class TestSubscribeEmit:
    def test_basic_emit(self):
        bus = EventBus()
        received = []
        bus.subscribe(EventTypes.FILTERS_CHANGED, lambda e: received.append(e))
        bus.emit(
            AuctionEvent(
                event_type=EventTypes.FILTERS_CHANGED,
                data={"filters": [{"name": "공격"}]},
                source="test",
            )
        )
        assert len(received) == 1
        assert received[0].data["filters"][0]["name"] == "공격"

    def test_multiple_handlers_in_order(self):
        bus = EventBus()
        results = []
        bus.subscribe("evt", lambda e: results.append("a"))
        bus.subscribe("evt", lambda e: results.append("b"))
        bus.emit(AuctionEvent(event_type="evt", data={}, source="test"))
        assert results == ["a", "b"]

    def test_no_handlers(self):
        """구독자 없는 이벤트 발행: 에러 없이 무시"""
        bus = EventBus()
        bus.emit(AuctionEvent(event_type="no_one_listens", data={}, source="test"))

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        handler = lambda e: received.append(e)  # noqa: E731
        bus.subscribe("evt", handler)
        bus.unsubscribe("evt", handler)
        bus.emit(AuctionEvent(event_type="evt", data={}, source="test"))
        assert len(received) == 0

    def test_unsubscribe_nonexistent(self):
        """미등록 핸들러 해제: 경고만, 에러 없음"""
        bus = EventBus()
        bus.unsubscribe("evt", lambda e: None)

    def test_subscriber_count(self):
        bus = EventBus()
        bus.subscribe(EventTypes.CATEGORY_CHANGED, lambda e: None)
        bus.subscribe(EventTypes.CATEGORY_CHANGED, lambda e: None)
        assert bus.subscriber_count(EventTypes.CATEGORY_CHANGED) == 2
        assert bus.subscriber_count(EventTypes.ITEMS_REPLACED) == 0

    def test_event_depth_recorded(self):
        bus = EventBus()
        depths = []

        def outer(event: AuctionEvent):
            depths.append(event.depth)
            bus.emit(AuctionEvent(event_type="inner", data={}, source="outer"))

        bus.subscribe("outer", outer)
        bus.subscribe("inner", lambda e: depths.append(e.depth))
        bus.emit(AuctionEvent(event_type="outer", data={}, source="test"))
        assert depths == [0, 1]


class TestDepthLimit:
    def test_max_depth_prevents_infinite_loop(self):
        bus = EventBus()
        call_count = 0

        def recursive_handler(event: AuctionEvent):
            nonlocal call_count
            call_count += 1
            # 다른 source로 발행해서 중복 체크를 우회
            bus.emit(
                AuctionEvent(event_type="chain", data={}, source=f"handler_{call_count}")
            )

        bus.subscribe("chain", recursive_handler)
        bus.emit(AuctionEvent(event_type="chain", data={}, source="origin"))

        assert call_count == MAX_DEPTH


class TestDuplicatePrevention:
    def test_same_source_same_event_blocked(self):
        bus = EventBus()
        count = 0

        def handler(event: AuctionEvent):
            nonlocal count
            count += 1
            bus.emit(AuctionEvent(event_type="evt", data={}, source="same_source"))

        bus.subscribe("evt", handler)
        bus.emit(AuctionEvent(event_type="evt", data={}, source="same_source"))
        assert count == 1

    def test_different_source_allowed(self):
        bus = EventBus()
        received = []

        bus.subscribe("evt", lambda e: received.append(e.source))
        bus.emit(AuctionEvent(event_type="evt", data={}, source="source_a"))
        bus.emit(AuctionEvent(event_type="evt", data={}, source="source_b"))
        assert received == ["source_a", "source_b"]


class TestResetChain:
    def test_chain_resets_after_outermost_emit(self):
        """최상위 emit이 끝나면 같은 source의 같은 이벤트를 다시 보낼 수 있다"""
        bus = EventBus()
        received = []
        bus.subscribe("re", lambda e: received.append(1))
        bus.emit(AuctionEvent(event_type="re", data={}, source="s"))
        bus.emit(AuctionEvent(event_type="re", data={}, source="s"))
        assert len(received) == 2

    def test_reset_chain_explicit(self):
        bus = EventBus()
        received = []
        bus.subscribe("re", lambda e: received.append(1))
        bus.emit(AuctionEvent(event_type="re", data={}, source="s"))
        bus.reset_chain()
        bus.emit(AuctionEvent(event_type="re", data={}, source="s"))
        assert len(received) == 2


class TestHandlerError:
    def test_handler_exception_doesnt_stop_others(self):
        bus = EventBus()
        results = []

        def bad_handler(e):
            raise ValueError("boom")

        def good_handler(e):
            results.append("ok")

        bus.subscribe("evt", bad_handler)
        bus.subscribe("evt", good_handler)
        bus.emit(AuctionEvent(event_type="evt", data={}, source="test"))
        assert results == ["ok"]

    def test_handler_exception_does_not_block_next_emit(self):
        bus = EventBus()
        results = []

        def bad_handler(e):
            raise RuntimeError("boom")

        bus.subscribe("evt", bad_handler)
        bus.subscribe("evt", lambda e: results.append(e.source))
        bus.emit(AuctionEvent(event_type="evt", data={}, source="a"))
        bus.emit(AuctionEvent(event_type="evt", data={}, source="a"))
        assert results == ["a", "a"]


class TestClear:
    def test_clear_removes_all(self):
        bus = EventBus()
        bus.subscribe("a", lambda e: None)
        bus.subscribe("b", lambda e: None)
        assert bus.handler_count == 2
        bus.clear()
        assert bus.handler_count == 0
