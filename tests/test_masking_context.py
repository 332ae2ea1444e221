"""Tests for metadata masking and context merging"""

from collections import namedtuple
from types import SimpleNamespace

from universal_logger.core.context import extract_path, merge_metadata
from universal_logger.core.masking import mask_metadata


class TestMasking:
    """Test sensitive field masking."""

    def test_top_level(self):
        masked = mask_metadata({"user": "bob", "password": "hunter2"}, ["password"])
        assert masked == {"user": "bob", "password": "********"}

    def test_placeholder_length_is_fixed(self):
        short = mask_metadata({"token": "a"}, ["token"])
        long = mask_metadata({"token": "a" * 100}, ["token"])
        assert short == long == {"token": "********"}

    def test_case_insensitive(self):
        masked = mask_metadata({"Password": "x", "API_TOKEN": "y"}, ["password", "api_token"])
        assert masked == {"Password": "********", "API_TOKEN": "********"}

    def test_nested_mappings_and_lists(self):
        metadata = {
            "request": {"headers": {"token": "abc"}},
            "accounts": [{"name": "a", "secret": "s1"}, "plain", 3],
        }
        masked = mask_metadata(metadata, ["token", "secret"])

        assert masked["request"]["headers"]["token"] == "********"
        assert masked["accounts"] == [{"name": "a", "secret": "********"}, "plain", 3]

    def test_non_string_values_masked(self):
        masked = mask_metadata({"secret": {"nested": 1}}, ["secret"])
        assert masked == {"secret": "********"}

    def test_named_tuple_preserved(self):
        Pair = namedtuple("Pair", "left right")
        masked = mask_metadata({"pair": Pair({"token": "t"}, 2)}, ["token"])
        assert masked["pair"] == Pair({"token": "********"}, 2)

    def test_custom_char_and_length(self):
        masked = mask_metadata({"password": "x"}, ["password"], mask_char="#", length=3)
        assert masked == {"password": "###"}

    def test_original_untouched(self):
        metadata = {"auth": {"password": "hunter2"}}
        mask_metadata(metadata, ["password"])
        assert metadata == {"auth": {"password": "hunter2"}}

    def test_no_field_names(self):
        metadata = {"password": "hunter2"}
        masked = mask_metadata(metadata, [])
        assert masked == metadata
        assert masked is not metadata


class TestExtractPath:
    """Test dotted path resolution."""

    def test_mapping_keys(self):
        assert extract_path({"a": {"b": 1}}, "a.b") == 1

    def test_sequence_index(self):
        assert extract_path({"items": [{"id": 7}]}, "items.0.id") == 7

    def test_attributes(self):
        assert extract_path({"req": SimpleNamespace(id="r-1")}, "req.id") == "r-1"

    def test_missing(self):
        assert extract_path({"a": {}}, "a.b.c") is None
        assert extract_path({"items": []}, "items.3", default="none") == "none"


class TestMergeMetadata:
    """Test metadata precedence."""

    def test_precedence(self):
        merged = merge_metadata(
            {"key": "call", "call": 1},
            context={"key": "context", "ctx": 1},
            global_metadata={"service": "api"},
        )
        assert merged == {"key": "call", "ctx": 1, "call": 1, "service": "api"}

    def test_global_overrides_call(self):
        merged = merge_metadata({"service": "call"}, global_metadata={"service": "api"})
        assert merged == {"service": "api"}

    def test_correlation_id(self):
        merged = merge_metadata({}, context={"headers": {"x-request-id": "abc"}}, correlation_id_path="headers.x-request-id")
        assert merged["correlationId"] == "abc"

    def test_existing_correlation_id_kept(self):
        merged = merge_metadata({"correlationId": "mine", "req": {"id": "other"}}, correlation_id_path="req.id")
        assert merged["correlationId"] == "mine"

    def test_unresolved_correlation_id(self):
        assert "correlationId" not in merge_metadata({"a": 1}, correlation_id_path="req.id")
