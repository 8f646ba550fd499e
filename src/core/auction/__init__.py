"""경매 옵션 필터 Core: 순수 Python, 렌더링/검색 API 무관"""

from .aggregator import ActiveFilterSet, FilterCategory, categorize, passes_all
from .evaluator import PredicateEvaluator
from .facets import Facet, FacetExtractor, build_filter
from .filters import (
    EnchantFilter,
    ErgFilter,
    FilterDescriptor,
    FilterKind,
    RangeFilter,
    ReforgeOptionFilter,
    ReforgeSlot,
    ReforgeStatusFilter,
    SelectionFilter,
    SetEffectFilter,
    SetEffectSlot,
    SpecialModNoneFilter,
    SpecialModRangeFilter,
    SpecialModTypeFilter,
    UnknownFilter,
    filter_from_dict,
)
from .models import AuctionItem, ItemOption
from .option_types import FacetKind, OptionTypeRegistry, OptionTypeSpec, ValueRule

__all__ = [
    "ActiveFilterSet",
    "FilterCategory",
    "categorize",
    "passes_all",
    "PredicateEvaluator",
    "Facet",
    "FacetExtractor",
    "build_filter",
    "EnchantFilter",
    "ErgFilter",
    "FilterDescriptor",
    "FilterKind",
    "RangeFilter",
    "ReforgeOptionFilter",
    "ReforgeSlot",
    "ReforgeStatusFilter",
    "SelectionFilter",
    "SetEffectFilter",
    "SetEffectSlot",
    "SpecialModNoneFilter",
    "SpecialModRangeFilter",
    "SpecialModTypeFilter",
    "UnknownFilter",
    "filter_from_dict",
    "AuctionItem",
    "ItemOption",
    "FacetKind",
    "OptionTypeRegistry",
    "OptionTypeSpec",
    "ValueRule",
]
