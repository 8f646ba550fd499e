"""Facet 추출: 아이템 옵션 → 사용자에게 제시할 필터 후보"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .filters import FilterDescriptor, FilterKind, filter_from_dict
from .models import AuctionItem, ItemOption
from .option_types import FacetKind, OptionTypeRegistry, OptionTypeSpec


@dataclass(frozen=True)
class Facet:
    """필터 가능 항목. 렌더 패스마다 만들어지고 저장되지 않는다."""

    spec: OptionTypeSpec
    option: Optional[ItemOption] = None  # 원본 옵션 (현재 값 범위 표시용)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def display_name(self) -> str:
        return self.spec.display_name

    @property
    def kind(self) -> FacetKind:
        return self.spec.kind

    @property
    def field(self) -> str:
        return self.spec.field

    def to_dict(self) -> dict[str, Any]:
        data = self.spec.to_dict()
        data["option"] = self.option.to_dict() if self.option else None
        return data


class FacetExtractor:
    def __init__(self, registry: OptionTypeRegistry) -> None:
        self._registry = registry

    def extract(self, item: AuctionItem) -> list[Facet]:
        """옵션 순서대로 등록된 타입마다 facet 하나. 중복 제거하지 않는다."""
        facets: list[Facet] = []
        for option in item.options:
            spec = self._registry.get(option.option_type)
            if spec is None:
                continue
            facets.append(Facet(spec=spec, option=option))
        return facets

    def distinct(self, items: Iterable[AuctionItem]) -> list[Facet]:
        """아이템 전체에서 이름별 첫 facet만, 처음 등장한 순서로."""
        seen: dict[str, Facet] = {}
        for item in items:
            for facet in self.extract(item):
                seen.setdefault(facet.name, facet)
        return list(seen.values())

    def for_option_types(self, names: Iterable[str]) -> list[Facet]:
        """카테고리 옵션 구조(옵션 타입 이름 목록) → facet 목록."""
        facets: list[Facet] = []
        seen: set[str] = set()
        for name in names:
            spec = self._registry.get(name)
            if spec is None or name in seen:
                continue
            seen.add(name)
            facets.append(Facet(spec=spec))
        return facets


def build_filter(
    facet: Facet, kind: Optional[FilterKind] = None, **params: Any
) -> FilterDescriptor:
    """facet에서 필터 디스크립터 생성.

    kind 미지정 시 facet의 첫 번째 허용 kind. 허용되지 않은 kind는 ValueError.
    이름/표시 이름/분류 태그는 facet 정의에서 복사한다.
    params는 UI 형태 그대로 받아 filter_from_dict와 같은 규칙으로 정규화한다
    ("100" 같은 문자열 경계, dict 슬롯, camelCase 키).
    """
    allowed = facet.spec.filter_kinds
    chosen = kind or allowed[0]
    if chosen not in allowed:
        raise ValueError(
            f"{chosen.value} filter not allowed for {facet.name} "
            f"(allowed: {', '.join(k.value for k in allowed)})"
        )

    # facet 기본값은 snake_case 키로 둔다. camelCase params가 우선한다.
    base: dict[str, Any] = {
        "name": facet.name,
        "display_name": facet.display_name,
        "category": facet.spec.category,
    }
    if chosen in (FilterKind.RANGE, FilterKind.SELECTION):
        base["field"] = facet.field
    if chosen is FilterKind.RANGE:
        base["is_percent"] = facet.spec.is_percent
    base.update(params)
    base["kind"] = chosen.value
    return filter_from_dict(base)
