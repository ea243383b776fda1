"""Tests for path-addressed template patches."""

from xml.etree import ElementTree

from board_core.dsl import PatchOp
from board_core.patch import apply_patch, apply_patches, resolve_path
from board_core.template_engine import parse_template

MARKUP = (
    '<frame title="SWOT">'
    '<grid cols="2">'
    '<sticky color="#FFD700">One</sticky>'
    '<sticky color="#FF6B6B">Two</sticky>'
    '<sticky>Three<text>nested</text></sticky>'
    '</grid>'
    '</frame>'
)


def _stickies(root):
    return list(root.iter("sticky"))


class TestResolvePath:
    def test_first_segment_searches_whole_tree(self):
        root = parse_template(MARKUP)
        target = resolve_path(root, "sticky[2]")
        assert target.element is _stickies(root)[1]
        assert target.attr is None

    def test_root_is_searched(self):
        root = parse_template(MARKUP)
        target = resolve_path(root, "frame/@title")
        assert target.element is root
        assert target.attr == "title"

    def test_index_defaults_to_one(self):
        root = parse_template(MARKUP)
        assert resolve_path(root, "grid/sticky").element is _stickies(root)[0]

    def test_later_segments_only_look_at_children(self):
        root = parse_template(MARKUP)
        assert resolve_path(root, "frame/sticky") is None

    def test_out_of_range(self):
        root = parse_template(MARKUP)
        assert resolve_path(root, "grid/sticky[9]") is None
        assert resolve_path(root, "grid/sticky[0]") is None


class TestApplyPatch:
    def test_replaces_text_content(self):
        root = parse_template(MARKUP)
        assert apply_patch(root, "grid/sticky[3]", "Replaced")
        third = _stickies(root)[2]
        assert third.text == "Replaced"
        assert list(third) == []

    def test_sets_attribute(self):
        root = parse_template(MARKUP)
        assert apply_patch(root, "grid/sticky[2]/@color", "#000000")
        assert _stickies(root)[1].get("color") == "#000000"

    def test_unresolved_path_leaves_tree_unchanged(self):
        root = parse_template(MARKUP)
        assert apply_patch(root, "row/sticky", "X") is False
        assert [s.text for s in _stickies(root)] == ["One", "Two", "Three"]

    def test_apply_patches_in_order(self):
        root = parse_template(MARKUP)
        apply_patches(root, [
            PatchOp(path="sticky[1]", value="first"),
            ("sticky[1]", "second"),
            PatchOp(path="missing", value="ignored"),
        ])
        assert _stickies(root)[0].text == "second"

    def test_disjoint_patches_commute(self):
        patches = [("sticky[1]", "x"), ("sticky[2]/@color", "#f00")]
        forward = parse_template(MARKUP)
        backward = parse_template(MARKUP)
        apply_patches(forward, patches)
        apply_patches(backward, list(reversed(patches)))
        assert ElementTree.tostring(forward) == ElementTree.tostring(backward)
        assert _stickies(forward)[0].text == "x"
        assert _stickies(forward)[1].get("color") == "#f00"
