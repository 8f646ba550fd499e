"""조건 평가기: (아이템, 필터) → 통과 여부

filter.kind 하나가 실행할 알고리즘을 결정한다.
평가는 순수 함수이며 예외를 밖으로 내보내지 않는다.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Union

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
)
from .models import AuctionItem, ItemOption
from .numeric import (
    normalize_query,
    parse_int,
    parse_level,
    parse_number,
    pierce_level,
    reforge_level,
    within,
    within_or_unknown,
)
from .option_types import (
    ENCHANT,
    ENCHANT_PREFIX,
    ENCHANT_SUFFIX,
    ERG,
    REFORGE_OPTION,
    REFORGE_RANK,
    SET_EFFECT,
    SPECIAL_MOD,
    OptionTypeRegistry,
    ValueRule,
)

logger = logging.getLogger(__name__)

Handler = Callable[[AuctionItem, Any], bool]
Slot = Union[ReforgeSlot, SetEffectSlot]


def _has_positive_bound(*bounds: Optional[float]) -> bool:
    return any(b is not None and b > 0 for b in bounds)


def _matches_query(option: ItemOption, term: str) -> bool:
    return term in (option.value or "").lower()


def _check_slots(
    candidates: list[ItemOption],
    slots: Iterable[Slot],
    measure: Callable[[ItemOption], Optional[int]],
) -> bool:
    """다중 슬롯 공통 알고리즘.

    비어 있지 않은 슬롯마다:
    1. 이름이 포함된 옵션이 하나 이상 있어야 한다 (필수)
    2. 범위가 있으면 그중 하나 이상이 범위를 만족해야 한다
    모든 슬롯 AND.
    """
    for slot in slots:
        if slot.is_empty:
            continue
        term = normalize_query(slot.name_query)
        matches = [o for o in candidates if _matches_query(o, term)]
        if not matches:
            return False
        if slot.lower is None and slot.upper is None:
            continue
        if not any(within_or_unknown(measure(o), slot.lower, slot.upper) for o in matches):
            return False
    return True


class PredicateEvaluator:
    """필터 kind별 평가 알고리즘 모음.

    레지스트리는 파생 값 규칙(피어싱 레벨)을 조회하는 데 사용한다.
    등록되지 않은 kind는 통과 처리한다 (fail-open).
    """

    def __init__(self, registry: OptionTypeRegistry) -> None:
        self._registry = registry
        self._handlers: dict[FilterKind, Handler] = {
            FilterKind.RANGE: self._check_range,
            FilterKind.SELECTION: self._check_selection,
            FilterKind.ENCHANT: self._check_enchant,
            FilterKind.REFORGE_STATUS: self._check_reforge_status,
            FilterKind.REFORGE_OPTION: self._check_reforge_option,
            FilterKind.ERG: self._check_erg,
            FilterKind.SPECIAL_MOD_TYPE: self._check_special_mod_type,
            FilterKind.SPECIAL_MOD_RANGE: self._check_special_mod_range,
            FilterKind.SPECIAL_MOD_NONE: self._check_special_mod_none,
            FilterKind.SET_EFFECT: self._check_set_effect,
        }
        missing = set(FilterKind) - set(self._handlers)
        if missing:
            raise RuntimeError(
                f"No evaluator for filter kinds: {sorted(k.value for k in missing)}"
            )

    @property
    def registry(self) -> OptionTypeRegistry:
        return self._registry

    def evaluate(self, item: AuctionItem, flt: FilterDescriptor) -> bool:
        handler = self._handlers.get(flt.kind) if flt.kind is not None else None
        if handler is None:
            logger.debug(
                "Filter kind %r not recognised (%s), passing item %s",
                flt.kind_name,
                flt.name,
                item.item_id,
            )
            return True
        try:
            return handler(item, flt)
        except (TypeError, ValueError, AttributeError):
            logger.exception(
                "Filter %s (%s) failed on item %s", flt.name, flt.kind_name, item.item_id
            )
            return False

    # ── 단일 옵션 ─────────────────────────────────────────────

    def _check_range(self, item: AuctionItem, flt: RangeFilter) -> bool:
        option = item.first_option(flt.name)
        # 옵션 없음 = 값 0: 양수 경계가 있을 때만 탈락
        if option is None:
            return not _has_positive_bound(flt.min, flt.max)

        spec = self._registry.get(flt.name)
        if spec is not None and spec.value_rule is ValueRule.PIERCE_LEVEL:
            value = pierce_level(option.value, option.value2)
        else:
            value = parse_number(option.get_field(flt.field or "value"))
        return within(value, flt.min, flt.max)

    def _check_selection(self, item: AuctionItem, flt: SelectionFilter) -> bool:
        option = item.first_option(flt.name)
        if option is None:
            return False
        return option.get_field(flt.field or "value") == flt.value

    def _check_reforge_status(self, item: AuctionItem, flt: ReforgeStatusFilter) -> bool:
        rank_option = item.first_option(REFORGE_RANK)
        if rank_option is None:
            return False

        if flt.rank is not None:
            rank = parse_int(rank_option.value)
            if rank is None or rank != flt.rank:
                return False

        if flt.line_count is not None:
            if len(item.options_of_type(REFORGE_OPTION)) != flt.line_count:
                return False

        return True

    def _check_erg(self, item: AuctionItem, flt: ErgFilter) -> bool:
        erg = item.first_option(ERG)
        if erg is None:
            return False
        if flt.grade and erg.sub_type != flt.grade:
            return False
        return within_or_unknown(parse_level(erg.value), flt.min_level, flt.max_level)

    # ── 다중 옵션 ─────────────────────────────────────────────

    def _check_enchant(self, item: AuctionItem, flt: EnchantFilter) -> bool:
        enchants = item.options_of_type(ENCHANT)
        for query, sub_type in (
            (flt.prefix_query, ENCHANT_PREFIX),
            (flt.suffix_query, ENCHANT_SUFFIX),
        ):
            term = normalize_query(query)
            if not term:
                continue
            candidates = [o for o in enchants if o.sub_type == sub_type]
            if not candidates:
                return False
            if not any(_matches_query(o, term) for o in candidates):
                return False
        return True

    def _check_reforge_option(self, item: AuctionItem, flt: ReforgeOptionFilter) -> bool:
        return _check_slots(
            item.options_of_type(REFORGE_OPTION),
            flt.slots,
            lambda o: reforge_level(o.value),
        )

    def _check_set_effect(self, item: AuctionItem, flt: SetEffectFilter) -> bool:
        return _check_slots(
            item.options_of_type(SET_EFFECT),
            flt.slots,
            lambda o: parse_level(o.value2),
        )

    def _check_special_mod_none(self, item: AuctionItem, flt: SpecialModNoneFilter) -> bool:
        return not item.options_of_type(SPECIAL_MOD)

    def _check_special_mod_type(self, item: AuctionItem, flt: SpecialModTypeFilter) -> bool:
        return any(o.sub_type == flt.mod_type for o in item.options_of_type(SPECIAL_MOD))

    def _check_special_mod_range(
        self, item: AuctionItem, flt: SpecialModRangeFilter
    ) -> bool:
        mods = item.options_of_type(SPECIAL_MOD)
        if flt.mod_type:
            mods = [o for o in mods if o.sub_type == flt.mod_type]
        if not mods:
            return False
        if flt.min is None and flt.max is None:
            return True
        return any(within_or_unknown(parse_level(o.value), flt.min, flt.max) for o in mods)
