"""
Unit tests for display-name resolution.

Run with: python -m pytest _tests/test_name_resolver.py -v
"""

import logging

import pytest

from region_overlap.name_resolver import (
    NO_NAME_PLACEHOLDER,
    resolve_name,
    resolve_relation_name,
)


class TestPriorityKeys:
    """Rule 1: fixed priority list."""

    def test_english_name_key(self):
        assert resolve_name({"NAME_EN": "Vientiane"}) == "Vientiane"

    def test_priority_order_beats_bag_order(self):
        props = {"ADM2_EN": "Sisattanak", "NAME_2": "Sisattanak District", "name": "ສີສັດຕະນາກ"}
        assert resolve_name(props) == "ສີສັດຕະນາກ"

    def test_blank_and_none_values_are_skipped(self):
        props = {"name": "   ", "NAME": None, "NAME_1": "Champasak"}
        assert resolve_name(props) == "Champasak"

    def test_values_are_stringified_and_trimmed(self):
        assert resolve_name({"NAME_1": 42}) == "42"
        assert resolve_name({"shapeName": "  Xaysetha  "}) == "Xaysetha"


class TestSubstringScan:
    """Rule 2: any key containing "name", case-insensitive, in bag order."""

    def test_embedded_name_key(self):
        assert resolve_name({"foo_NAME_bar": "X"}) == "X"

    def test_first_non_empty_in_bag_order_wins(self):
        props = {"id": 7, "altname": "", "DistrictName": "Hadxaifong", "prov_name_la": "Vientiane"}
        assert resolve_name(props) == "Hadxaifong"

    def test_case_insensitive_match(self):
        assert resolve_name({"NaMe_Local": "Pakse"}) == "Pakse"


class TestCodePlaceholder:
    """Rule 3: code-like keys produce a traceable placeholder."""

    def test_gid_placeholder(self):
        assert resolve_name({"GID_2": "LAO.1.3_1", "area": 12}) == "(no name: GID_2=LAO.1.3_1)"

    def test_code_list_order(self):
        props = {"shapeID": "abc", "HASC_1": "LA.VT"}
        assert resolve_name(props) == "(no name: HASC_1=LA.VT)"

    def test_blank_name_falls_through_to_code(self):
        assert resolve_name({"name": "", "GID_0": "LAO"}) == "(no name: GID_0=LAO)"


class TestNoName:
    """Rule 4: generic placeholder plus a triage warning."""

    def test_empty_bag(self):
        assert resolve_name({}) == NO_NAME_PLACEHOLDER

    def test_none_bag(self):
        assert resolve_name(None) == NO_NAME_PLACEHOLDER

    def test_warning_carries_keys_and_id(self, caplog):
        props = {f"k{i}": i for i in range(12)}
        with caplog.at_level(logging.WARNING, logger="region_overlap.name_resolver"):
            assert resolve_name(props, feature_id="feat-9", level=2) == NO_NAME_PLACEHOLDER

        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 1
        assert "NO_NAME_FEATURE" in messages[0]
        assert "feat-9" in messages[0]
        assert "level=2" in messages[0]
        assert "k9" in messages[0]
        assert "k10" not in messages[0]  # only the first 10 keys

    def test_no_warning_when_resolved(self, caplog):
        with caplog.at_level(logging.WARNING, logger="region_overlap.name_resolver"):
            resolve_name({"GID_1": "LAO.2_1"})
        assert caplog.records == []


class TestRelationNames:
    """OSM relation tags."""

    @pytest.mark.parametrize(
        "tags, expected",
        [
            ({"name": "ນະຄອນຫຼວງວຽງຈັນ", "name:en": "Vientiane Prefecture"}, "ນະຄອນຫຼວງວຽງຈັນ"),
            ({"name:en": "Vientiane Prefecture", "name:local": "x"}, "Vientiane Prefecture"),
            ({"name:local": "Vientiane"}, "Vientiane"),
            ({"admin_level": "4"}, NO_NAME_PLACEHOLDER),
            (None, NO_NAME_PLACEHOLDER),
        ],
    )
    def test_tag_priority(self, tags, expected):
        assert resolve_relation_name(tags) == expected
