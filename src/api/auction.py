"""Auction option filter API endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.schemas import (
    FacetsRequest,
    FacetsResponse,
    FilterRequest,
    FilterResponse,
    OptionTypesResponse,
    SuggestionsResponse,
)
from src.core.auction import (
    ActiveFilterSet,
    AuctionItem,
    FacetExtractor,
    OptionTypeRegistry,
    PredicateEvaluator,
    filter_from_dict,
)
from src.core.auction.option_types import ENCHANT_PREFIX, ENCHANT_SUFFIX
from src.core.logging import get_logger
from src.services.metadata_service import MetadataCache

logger = get_logger(__name__)

router = APIRouter(prefix="/auction", tags=["auction"])

SUGGESTION_KINDS = ("enchant-prefix", "enchant-suffix", "reforge", "set-effect")


def get_registry(request: Request) -> OptionTypeRegistry:
    """OptionTypeRegistry 인스턴스 반환 (의존성 주입)"""
    registry: OptionTypeRegistry = request.app.state.registry
    return registry


def get_evaluator(request: Request) -> PredicateEvaluator:
    """PredicateEvaluator 인스턴스 반환 (의존성 주입)"""
    evaluator: PredicateEvaluator = request.app.state.evaluator
    return evaluator


def get_extractor(request: Request) -> FacetExtractor:
    """FacetExtractor 인스턴스 반환 (의존성 주입)"""
    extractor: FacetExtractor = request.app.state.extractor
    return extractor


def get_metadata(request: Request) -> MetadataCache:
    """MetadataCache 인스턴스 반환 (의존성 주입)"""
    metadata: MetadataCache = request.app.state.metadata
    return metadata


@router.get("/option-types", response_model=OptionTypesResponse)
def list_option_types(
    registry: OptionTypeRegistry = Depends(get_registry),
) -> OptionTypesResponse:
    """필터 가능한 옵션 타입 목록"""
    specs = registry.get_all()
    return OptionTypesResponse(
        count=len(specs), option_types=[s.to_dict() for s in specs]
    )


@router.post("/facets", response_model=FacetsResponse)
def extract_facets(
    request: FacetsRequest,
    extractor: FacetExtractor = Depends(get_extractor),
) -> FacetsResponse:
    """검색 결과 전체에서 facet 추출 (이름별 첫 등장)"""
    items = [AuctionItem.from_dict(i.to_record()) for i in request.items]
    facets = extractor.distinct(items)
    return FacetsResponse(count=len(facets), facets=[f.to_dict() for f in facets])


@router.post("/filter", response_model=FilterResponse)
def apply_filters(
    request: FilterRequest,
    evaluator: PredicateEvaluator = Depends(get_evaluator),
) -> FilterResponse:
    """필터 적용. 요청마다 새 활성 필터 집합을 만든다."""
    active = ActiveFilterSet(evaluator)
    for index, raw in enumerate(request.filters):
        try:
            active.add(filter_from_dict(raw))
        except ValueError as e:
            logger.info("Rejected filter #%d: %s", index, e)
            raise HTTPException(status_code=422, detail=f"filters[{index}]: {e}")

    items = [AuctionItem.from_dict(i.to_record()) for i in request.items]
    matched = active.apply(items)
    categories = {
        category.value: [f.to_dict() for f in filters]
        for category, filters in active.categorize().items()
    }
    return FilterResponse(
        total=len(items),
        matched=len(matched),
        items=[item.to_dict() for item in matched],
        categories=categories,
    )


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    kind: str = Query(..., description="enchant-prefix, enchant-suffix, reforge, set-effect"),
    q: str = Query("", description="부분 문자열 (대소문자 무시)"),
    category: str = Query("", description="아이템 카테고리 (reforge/set-effect에 필요)"),
    metadata: MetadataCache = Depends(get_metadata),
) -> SuggestionsResponse:
    """메타데이터 어휘 부분 문자열 검색"""
    if kind not in SUGGESTION_KINDS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown suggestion kind: {kind} (expected one of {', '.join(SUGGESTION_KINDS)})",
        )

    results: list[dict[str, Any]]
    if kind in ("enchant-prefix", "enchant-suffix"):
        await metadata.load_common()
        sub_type = ENCHANT_PREFIX if kind == "enchant-prefix" else ENCHANT_SUFFIX
        results = metadata.search_enchants(sub_type, q)
    elif kind == "reforge":
        if not category:
            raise HTTPException(status_code=400, detail="category is required")
        await metadata.load_common()
        results = [{"name": n} for n in metadata.search_reforge_options(category, q)]
    else:
        if not category:
            raise HTTPException(status_code=400, detail="category is required")
        await metadata.load_category(category)
        results = [{"name": n} for n in metadata.search_set_effects(category, q)]

    return SuggestionsResponse(kind=kind, query=q, suggestions=results)
