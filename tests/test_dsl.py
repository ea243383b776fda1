"""Tests for the template DSL parser."""

from board_core.dsl import ApplyOp, PatchOp, parse_dsl


class TestApplyLines:
    def test_name_only(self):
        assert parse_dsl("swot") == [ApplyOp(name="swot")]

    def test_title(self):
        assert parse_dsl('swot "My Title"') == [ApplyOp(name="swot", title="My Title")]

    def test_title_and_slots(self):
        result = parse_dsl('swot "SWOT: Q1 Review" ; Strong brand ; High costs ; New markets ; Competition')
        assert result == [ApplyOp(
            name="swot",
            title="SWOT: Q1 Review",
            slots=[["Strong brand"], ["High costs"], ["New markets"], ["Competition"]],
        )]

    def test_slots_without_title(self):
        op = parse_dsl("swot ; A ; B ; C ; D")[0]
        assert op.title is None
        assert op.slots == [["A"], ["B"], ["C"], ["D"]]

    def test_pipe_values(self):
        op = parse_dsl('user-journey "Journey" ; Awareness|See ad|Curious ; Consideration|Read reviews')[0]
        assert op.slots == [["Awareness", "See ad", "Curious"], ["Consideration", "Read reviews"]]

    def test_whitespace_is_trimmed(self):
        assert parse_dsl("tpl ;  A  |  B  ;  C  ")[0].slots == [["A", "B"], ["C"]]

    def test_empty_slots_are_dropped(self):
        assert parse_dsl("tpl ; A ;; ; B")[0].slots == [["A"], ["B"]]

    def test_unterminated_title_falls_into_slots(self):
        op = parse_dsl('swot "Unclosed ; A')[0]
        assert op.title is None
        assert op.slots == [['"Unclosed'], ["A"]]


class TestPatchLines:
    def test_text_patch(self):
        assert parse_dsl("@grid/sticky[1] Updated text") == [
            PatchOp(path="grid/sticky[1]", value="Updated text")
        ]

    def test_attribute_patch(self):
        assert parse_dsl("@grid/sticky[2]/@color #FF0000") == [
            PatchOp(path="grid/sticky[2]/@color", value="#FF0000")
        ]

    def test_no_value(self):
        assert parse_dsl("@frame/@title") == [PatchOp(path="frame/@title", value="")]

    def test_type_tags(self):
        assert parse_dsl("@x y")[0].type == "patch"
        assert parse_dsl("x")[0].type == "apply"


class TestDocuments:
    def test_mixed_lines_in_order(self):
        result = parse_dsl('swot "Q1" ; S ; W ; O ; T\n@grid/sticky[1]/@color #FF0000')
        assert [op.type for op in result] == ["apply", "patch"]
        assert len(result[0].slots) == 4

    def test_blank_lines_skipped(self):
        assert len(parse_dsl('\n\nswot "Title"\n\n@grid/sticky[1] Hello\n\n')) == 2

    def test_empty_input(self):
        assert parse_dsl("") == []
        assert parse_dsl("   \n   \n  ") == []

    def test_every_non_blank_line_yields_a_record(self):
        text = 'swot\n@\n"quoted only"\n;;;\nkanban "K" ; a'
        assert len(parse_dsl(text)) == 5
