"""Tests for the 3-word label codec."""

import uuid

import pytest

from board_core.labels import WORDLIST, object_label, uuid_to_label

COLLIDING_A = "bbb13f7a-966e-4c7c-aea5-4bac3ce98505"
COLLIDING_B = "ef4f8cd0-25b9-4029-9316-0f2f3b069b34"


class TestUuidToLabel:
    def test_wordlist_covers_every_byte(self):
        assert len(WORDLIST) == 256
        assert len(set(WORDLIST)) == 256

    def test_three_lowercase_words(self):
        for _ in range(50):
            words = uuid_to_label(str(uuid.uuid4())).split(" ")
            assert len(words) == 3
            assert all(w.isalpha() and w.islower() for w in words)

    def test_deterministic(self):
        ident = str(uuid.uuid4())
        assert uuid_to_label(ident) == uuid_to_label(ident)

    def test_dashes_are_ignored(self):
        ident = str(uuid.uuid4())
        assert uuid_to_label(ident) == uuid_to_label(ident.replace("-", ""))

    def test_known_collision_pair(self):
        assert uuid_to_label(COLLIDING_A) == "tango golf potato"
        assert uuid_to_label(COLLIDING_B) == "tango golf potato"

    def test_all_zero_bytes(self):
        assert uuid_to_label("00000000-0000-0000-0000-000000000000") == "ack ack ack"

    def test_last_word_absorbs_remainder(self):
        # 16 bytes split 5/5/6: the 16th byte only affects the last word
        base = "00" * 15
        assert uuid_to_label(base + "00") == "ack ack ack"
        assert uuid_to_label(base + "01") == "ack ack alabama"

    def test_non_hex_raises(self):
        with pytest.raises(ValueError):
            uuid_to_label("not-a-uuid")


class TestObjectLabel:
    def test_stored_label_wins(self):
        assert object_label({"id": COLLIDING_A, "label": "custom label here"}) == "custom label here"

    def test_computed_from_id(self):
        assert object_label({"id": COLLIDING_B}) == "tango golf potato"

    def test_non_hex_id_has_no_label(self):
        assert object_label({"id": "frame-1"}) is None
