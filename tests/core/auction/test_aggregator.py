"""활성 필터 집합 + 분류 테스트"""

import itertools

from src.core.auction.aggregator import (
    ActiveFilterSet,
    FilterCategory,
    categorize,
    passes_all,
)
from src.core.auction.evaluator import PredicateEvaluator
from src.core.auction.filters import (
    EnchantFilter,
    ErgFilter,
    RangeFilter,
    ReforgeOptionFilter,
    ReforgeSlot,
    ReforgeStatusFilter,
    SetEffectFilter,
    SpecialModNoneFilter,
    SpecialModTypeFilter,
    UnknownFilter,
)
from src.core.auction.models import AuctionItem, ItemOption
from src.core.auction.option_types import OptionTypeRegistry


def _make_item(item_id: str, *options: ItemOption) -> AuctionItem:
    return AuctionItem(item_id=item_id, display_name=item_id, options=options)


def _make_items() -> list[AuctionItem]:
    return [
        _make_item(
            "strong",
            ItemOption("공격", value="20", value2="180"),
            ItemOption("인챈트", value="충격을 다스리는", sub_type="접두"),
        ),
        _make_item("weak", ItemOption("공격", value="10", value2="90")),
        _make_item(
            "modded",
            ItemOption("공격", value="20", value2="170"),
            ItemOption("특별 개조", value="5", sub_type="R"),
        ),
    ]


class TestPassesAll:
    def test_identity(self, evaluator: PredicateEvaluator) -> None:
        for item in _make_items():
            assert passes_all(evaluator, item, [])

    def test_and(self, evaluator: PredicateEvaluator) -> None:
        strong, weak, modded = _make_items()
        filters = [
            RangeFilter(name="공격", field="value2", min=150),
            SpecialModNoneFilter(name="특별 개조"),
        ]
        assert passes_all(evaluator, strong, filters)
        assert not passes_all(evaluator, weak, filters)
        assert not passes_all(evaluator, modded, filters)

    def test_unknown_kind_does_not_restrict(self, evaluator: PredicateEvaluator) -> None:
        items = _make_items()
        filters = [UnknownFilter(name="공격", raw_kind="fancy")]
        assert all(passes_all(evaluator, item, filters) for item in items)


class TestActiveFilterSet:
    def test_replace_by_name(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator)
        assert active.add(RangeFilter(name="공격", min=100)) is None
        previous = active.add(RangeFilter(name="공격", min=150))
        assert previous.min == 100
        assert len(active) == 1
        assert active.filters[0].min == 150

    def test_multi_slot_keys(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator)
        active.add(ReforgeOptionFilter(name="세공 옵션", slot=0, slots=(ReforgeSlot("a"),)))
        active.add(ReforgeOptionFilter(name="세공 옵션", slot=1, slots=(ReforgeSlot("b"),)))
        active.add(ReforgeOptionFilter(name="세공 옵션", slot=1, slots=(ReforgeSlot("c"),)))
        assert len(active) == 2
        assert ("세공 옵션", 1) in active

    def test_special_mod_kinds_share_name(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator)
        active.add(SpecialModTypeFilter(name="특별 개조", mod_type="R"))
        active.add(SpecialModNoneFilter(name="특별 개조"))
        assert len(active) == 1
        assert isinstance(active.filters[0], SpecialModNoneFilter)

    def test_remove(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator)
        active.add(RangeFilter(name="공격"))
        active.add(SetEffectFilter(name="세트 효과", slot=0))
        active.add(SetEffectFilter(name="세트 효과", slot=1))
        assert active.remove("공격")
        assert not active.remove("공격")
        assert active.remove_name("세트 효과") == 2
        assert len(active) == 0

    def test_snapshot_is_copy(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator, [RangeFilter(name="공격")])
        snapshot = active.filters
        active.clear()
        assert len(snapshot) == 1
        assert len(active) == 0

    def test_apply_preserves_order(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator, [RangeFilter(name="공격", field="value2", min=150)])
        assert [i.item_id for i in active.apply(_make_items())] == ["strong", "modded"]

    def test_apply_without_filters(self, evaluator: PredicateEvaluator) -> None:
        items = _make_items()
        assert ActiveFilterSet(evaluator).apply(items) == items

    def test_insertion_order_does_not_change_result(
        self, evaluator: PredicateEvaluator
    ) -> None:
        filters = [
            RangeFilter(name="공격", field="value2", min=150),
            EnchantFilter(name="인챈트", prefix_query="충격"),
            SpecialModNoneFilter(name="특별 개조"),
        ]
        items = _make_items()
        results = {
            tuple(i.item_id for i in ActiveFilterSet(evaluator, order).apply(items))
            for order in itertools.permutations(filters)
        }
        assert results == {("strong",)}


class TestCategorize:
    def _filters(self) -> list:
        return [
            RangeFilter(name="공격"),
            ReforgeStatusFilter(name="세공 랭크", category="세공"),
            ReforgeOptionFilter(name="세공 옵션", slot=0),
            SetEffectFilter(name="세트 효과", category="세트 효과", slot=0),
            SpecialModNoneFilter(name="특별 개조"),
            ErgFilter(name="에르그"),
            RangeFilter(name="밸런스", display_name="특별개조 단계"),
        ]

    def test_buckets(self, registry: OptionTypeRegistry) -> None:
        buckets = categorize(self._filters(), registry)
        names = {c: [f.name for f in fs] for c, fs in buckets.items()}
        assert names[FilterCategory.BASIC] == ["공격"]
        assert names[FilterCategory.REFORGE] == ["세공 랭크", "세공 옵션"]
        assert names[FilterCategory.SET_EFFECT] == ["세트 효과"]
        assert names[FilterCategory.SPECIAL] == ["특별 개조", "에르그", "밸런스"]

    def test_without_registry_uses_tags_only(self) -> None:
        buckets = categorize([ReforgeOptionFilter(name="세공 옵션", slot=0)])
        assert buckets[FilterCategory.BASIC][0].name == "세공 옵션"

    def test_all_buckets_present(self) -> None:
        buckets = categorize([])
        assert set(buckets) == set(FilterCategory)
        assert all(v == [] for v in buckets.values())

    def test_pure(self, evaluator: PredicateEvaluator) -> None:
        active = ActiveFilterSet(evaluator, self._filters())
        before = active.filters
        active.categorize()
        items = _make_items()
        assert active.filters == before
        assert active.apply(items) == ActiveFilterSet(evaluator, before).apply(items)
