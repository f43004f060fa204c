import pytest

from securepass.core.models import ApiKeyRecord, NoteRecord
from securepass.core.visibility import MASK, VisibilityState, reveal_secret


@pytest.fixture
def records():
    return (ApiKeyRecord(id="a", model_name="Gemini", secret_value="sk-a"),
            ApiKeyRecord(id="b", model_name="Claude", secret_value="sk-b"))


class TestVisibilityState:
    def test_masked_by_default(self, records):
        state = VisibilityState()
        assert state.render(records[0]) == MASK
        assert MASK == "•" * 12

    def test_toggle_affects_only_that_record(self, records):
        a, b = records
        state = VisibilityState()
        assert state.toggle("a") is True
        assert state.render(a) == "sk-a"
        assert state.render(b) == MASK
        assert state.toggle("a") is False
        assert state.render(a) == MASK

    def test_clear(self, records):
        state = VisibilityState()
        state.toggle("a")
        state.toggle("b")
        state.clear()
        assert not state.is_visible("a")
        assert not state.is_visible("b")


class TestRevealSecret:
    def test_returns_raw_value_regardless_of_mask(self, records):
        assert reveal_secret(records[1]) == "sk-b"

    def test_note_has_no_secret(self):
        with pytest.raises(ValueError):
            reveal_secret(NoteRecord(id="n", title="t", content="c"))
