"""Tests for tag entities."""
import pytest

from pathmark.core.errors import DecodeFailure
from pathmark.models.tag import Tag, TaggedItem, TaggedResult, TaggedType


def test_tag_from_path() -> None:
    """Test building an unsaved tag from a raw path."""
    tag = Tag.from_path("work/project/", user_id="u1", label="Project")

    assert tag.id == ""
    assert tag.path == "/work/project"
    assert tag.prefix == "/work"
    assert tag.name == "project"
    assert tag.depth == 2
    assert tag.user_id == "u1"
    assert tag.label == "Project"
    assert not tag.is_linked


def test_tag_with_path_keeps_identity() -> None:
    """Test that renaming re-derives structure but keeps other fields."""
    tag = Tag.from_path("/a", user_id="u1")
    tag.id = "T1"

    renamed = tag.with_path("/x/y")

    assert renamed.id == "T1"
    assert renamed.user_id == "u1"
    assert (renamed.path, renamed.prefix, renamed.name, renamed.depth) == ("/x/y", "/x", "y", 2)
    assert tag.path == "/a"


def test_tag_from_row_missing_column() -> None:
    """Test that an incomplete row raises DecodeFailure."""
    with pytest.raises(DecodeFailure) as exc_info:
        Tag.from_row({"id": "T1", "path": "/a"})

    assert exc_info.value.entity == "tag"


def test_tagged_item_key_ignores_id_and_value() -> None:
    """Test that the reconciliation key is the (tag, ref) pair."""
    a = TaggedItem(id="1", ref_id="r", tag_id="t", value="x")
    b = TaggedItem(id="2", ref_id="r", tag_id="t", value="y")

    assert a.key == b.key == ("t", "r")


def test_tagged_type_table() -> None:
    """Test the association table of each tagged type."""
    assert TaggedType.BOOKMARK.table == "tagged_bookmark"
    assert TaggedType("bookmark") is TaggedType.BOOKMARK


def test_tagged_result_find_tags() -> None:
    """Test pairing associations of one reference with their tags."""
    work = Tag(id="T1", path="/work")
    home = Tag(id="T2", path="/home")
    result = TaggedResult(
        tagged_type=TaggedType.BOOKMARK,
        tags=[work, home],
        tagged_items=[
            TaggedItem(id="1", ref_id="b1", tag_id="T2"),
            TaggedItem(id="2", ref_id="b2", tag_id="T1"),
            TaggedItem(id="3", ref_id="b1", tag_id="T1"),
        ],
    )

    found = result.find_tags("b1")

    assert [data.tag.path for data in found] == ["/home", "/work"]
    assert [data.item.id for data in found] == ["1", "3"]
    assert result.find_tags("missing") == []
