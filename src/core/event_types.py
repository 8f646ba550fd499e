"""이벤트 유형 상수

필터 엔진과 외부 협력자(렌더러, 검색, 카테고리 UI) 사이의 통지.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # 활성 필터 집합 변경. data: {"filters": [filter dict, ...]}
    FILTERS_CHANGED = "auction_filters_changed"

    # 카테고리 변경. data: {"category": str | None}
    # 카테고리 범위 facet 캐시와 활성 필터를 버린다.
    CATEGORY_CHANGED = "auction_category_changed"

    # 검색 결과 교체. data: {"count": int}
    ITEMS_REPLACED = "auction_items_replaced"

    # 재평가 패스 완료. data: {"total": int, "matched": int, "pass_no": int}
    FILTER_PASS_COMPLETED = "auction_filter_pass_completed"
