"""API request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


# === Request Schemas ===


class OptionPayload(BaseModel):
    """아이템 옵션 (경매장 API 키 그대로 허용)"""

    option_type: str = Field(..., min_length=1, description="옵션 타입 (예: 공격)")
    option_value: Optional[Any] = Field(default="", description="주 값")
    option_value2: Optional[Any] = Field(default=None, description="보조 값")
    option_sub_type: Optional[str] = Field(default=None, description="하위 타입")
    option_desc: Optional[str] = Field(default=None, description="설명")


class ItemPayload(BaseModel):
    """경매 아이템"""

    auction_item_no: str = Field(..., description="아이템 ID")
    item_name: str = Field(default="", description="표시 이름")
    auction_price_per_unit: int = Field(default=0, description="개당 가격")
    item_option: list[OptionPayload] = Field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class FacetsRequest(BaseModel):
    """facet 추출 요청"""

    items: list[ItemPayload] = Field(default_factory=list)


class FilterRequest(BaseModel):
    """필터 적용 요청. filters는 필터 dict 목록 (camelCase/snake_case 모두 허용)."""

    items: list[ItemPayload] = Field(default_factory=list)
    filters: list[dict[str, Any]] = Field(default_factory=list)


# === Response Schemas ===


class OptionTypesResponse(BaseModel):
    count: int
    option_types: list[dict[str, Any]]


class FacetsResponse(BaseModel):
    count: int
    facets: list[dict[str, Any]]


class FilterResponse(BaseModel):
    """필터 적용 결과"""

    total: int
    matched: int
    items: list[dict[str, Any]]
    categories: dict[str, list[dict[str, Any]]]


class SuggestionsResponse(BaseModel):
    kind: str
    query: str
    suggestions: list[dict[str, Any]]


class HealthResponse(BaseModel):
    status: str
    option_types: int
