"""경매 아이템 모델 + 필터 디스크립터 파싱 테스트"""

import pytest

from src.core.auction.filters import (
    MAX_SLOTS,
    EnchantFilter,
    FilterKind,
    RangeFilter,
    ReforgeOptionFilter,
    ReforgeStatusFilter,
    SelectionFilter,
    SetEffectFilter,
    SpecialModNoneFilter,
    UnknownFilter,
    filter_from_dict,
    parse_kind,
)
from src.core.auction.models import AuctionItem, ItemOption


# ── ItemOption / AuctionItem ──────────────────────────────────


class TestItemOption:
    def test_from_internal_keys(self) -> None:
        option = ItemOption.from_dict(
            {"type": "인챈트", "value": "글로리", "subType": "접미"}
        )
        assert option.option_type == "인챈트"
        assert option.value == "글로리"
        assert option.sub_type == "접미"

    def test_from_auction_api_keys(self) -> None:
        option = ItemOption.from_dict(
            {"option_type": "공격", "option_value": 20, "option_value2": 150}
        )
        assert option.value == "20"
        assert option.value2 == "150"

    def test_missing_type_raises(self) -> None:
        with pytest.raises(ValueError):
            ItemOption.from_dict({"value": "1"})

    def test_get_field_selectors(self) -> None:
        option = ItemOption("공격", value="20", value2="150", sub_type="x")
        assert option.get_field("value2") == "150"
        assert option.get_field("option_value2") == "150"
        assert option.get_field("subType") == "x"
        assert option.get_field("unknown") is None

    def test_frozen_immutable(self) -> None:
        option = ItemOption("공격", value="20")
        with pytest.raises(AttributeError):
            option.value = "30"  # type: ignore[misc]


class TestAuctionItem:
    def test_from_auction_record(self) -> None:
        item = AuctionItem.from_dict(
            {
                "auction_item_no": "A-1",
                "item_name": "롱 소드",
                "auction_price_per_unit": "120000",
                "item_option": [
                    {"option_type": "공격", "option_value": "20", "option_value2": "150"},
                    {"option_value": "타입 없음"},
                    {"option_type": "세공 랭크", "option_value": "1"},
                ],
            }
        )
        assert item.item_id == "A-1"
        assert item.display_name == "롱 소드"
        assert item.price == 120000
        assert [o.option_type for o in item.options] == ["공격", "세공 랭크"]

    def test_bad_price_defaults_to_zero(self) -> None:
        item = AuctionItem.from_dict({"id": "x", "price": "비쌈", "options": []})
        assert item.price == 0

    def test_options_of_type_keeps_order(self) -> None:
        item = AuctionItem(
            item_id="x",
            display_name="x",
            options=(
                ItemOption("세공 옵션", value="a"),
                ItemOption("공격", value="1"),
                ItemOption("세공 옵션", value="b"),
            ),
        )
        assert [o.value for o in item.options_of_type("세공 옵션")] == ["a", "b"]
        assert item.first_option("공격").value == "1"
        assert item.first_option("밸런스") is None

    def test_to_dict(self) -> None:
        item = AuctionItem("x", "검", 10, (ItemOption("공격", value="1"),))
        data = item.to_dict()
        assert data["id"] == "x"
        assert data["options"][0]["type"] == "공격"


# ── filter_from_dict ──────────────────────────────────────────


class TestParseKind:
    def test_known(self) -> None:
        assert parse_kind("range") is FilterKind.RANGE
        assert parse_kind("special-mod-none") is FilterKind.SPECIAL_MOD_NONE

    def test_select_alias(self) -> None:
        assert parse_kind("select") is FilterKind.SELECTION

    def test_unknown(self) -> None:
        assert parse_kind("fancy") is None


class TestFilterFromDict:
    def test_range(self) -> None:
        flt = filter_from_dict(
            {"name": "공격", "kind": "range", "field": "value2", "min": "100", "max": ""}
        )
        assert isinstance(flt, RangeFilter)
        assert flt.field == "value2"
        assert flt.min == 100.0
        assert flt.max is None

    def test_bad_bounds_become_unset(self) -> None:
        flt = filter_from_dict({"name": "밸런스", "kind": "range", "min": "많이"})
        assert isinstance(flt, RangeFilter)
        assert flt.min is None

    def test_type_key_accepted(self) -> None:
        flt = filter_from_dict({"name": "인챈트", "type": "enchant", "prefixQuery": "충격"})
        assert isinstance(flt, EnchantFilter)
        assert flt.prefix_query == "충격"
        assert flt.suffix_query is None

    def test_snake_case_keys(self) -> None:
        flt = filter_from_dict(
            {"name": "세공 랭크", "kind": "reforge-status", "rank": "1", "line_count": 3}
        )
        assert isinstance(flt, ReforgeStatusFilter)
        assert flt.rank == 1
        assert flt.line_count == 3

    def test_selection_alias(self) -> None:
        flt = filter_from_dict({"name": "공격", "kind": "select", "value": 20})
        assert isinstance(flt, SelectionFilter)
        assert flt.value == "20"

    def test_slots_truncated(self) -> None:
        flt = filter_from_dict(
            {
                "name": "세공 옵션",
                "kind": "reforge-option",
                "slots": [{"nameQuery": str(i)} for i in range(5)],
            }
        )
        assert isinstance(flt, ReforgeOptionFilter)
        assert len(flt.slots) == MAX_SLOTS

    def test_set_effect_slots(self) -> None:
        flt = filter_from_dict(
            {
                "name": "세트 효과",
                "kind": "set-effect",
                "slot": 1,
                "slots": [{"nameQuery": "스매시", "minValue": "5"}],
            }
        )
        assert isinstance(flt, SetEffectFilter)
        assert flt.key == ("세트 효과", 1)
        assert flt.slots[0].min_value == 5
        assert flt.slots[0].max_value is None

    def test_special_mod_none(self) -> None:
        flt = filter_from_dict({"name": "특별 개조", "kind": "special-mod-none"})
        assert isinstance(flt, SpecialModNoneFilter)
        assert flt.key == ("특별 개조", None)

    def test_unknown_kind_preserved(self) -> None:
        flt = filter_from_dict({"name": "공격", "kind": "fancy", "level": 3})
        assert isinstance(flt, UnknownFilter)
        assert flt.kind is None
        assert flt.kind_name == "fancy"
        assert flt.to_dict() == {"name": "공격", "kind": "fancy", "level": 3}

    def test_percent_flag_text(self) -> None:
        cases = [("false", False), ("0", False), ("", False), ("true", True), ("1", True)]
        for raw, expected in cases:
            flt = filter_from_dict({"name": "밸런스", "kind": "range", "isPercent": raw})
            assert flt.is_percent is expected
        assert filter_from_dict({"name": "밸런스", "kind": "range", "is_percent": True}).is_percent

    def test_missing_name_raises(self) -> None:
        with pytest.raises(ValueError):
            filter_from_dict({"kind": "range"})

    def test_missing_kind_raises(self) -> None:
        with pytest.raises(ValueError):
            filter_from_dict({"name": "공격"})

    def test_to_dict_round_trip_keys(self) -> None:
        flt = RangeFilter(name="밸런스", display_name="밸런스", min=10, is_percent=True)
        data = flt.to_dict()
        assert data["kind"] == "range"
        assert data["isPercent"] is True
        assert filter_from_dict(data) == flt
