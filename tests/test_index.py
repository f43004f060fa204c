from securepass.core.index import (
    ALL_CATEGORIES,
    RecordIndex,
    filter_records,
    platforms,
    tag_frequency,
    top_entries,
)
from securepass.core.models import ApiKeyRecord, NoteRecord, PasswordRecord


def _password(record_id, app, username="alice", tags=()):
    return PasswordRecord(id=record_id, app_name=app, username=username, secret_value="pw", tags=list(tags))


def _key(record_id, model, tags=()):
    return ApiKeyRecord(id=record_id, model_name=model, secret_value="sk", tags=list(tags))


class TestSearch:
    def test_empty_query_matches_everything(self):
        records = [_key("1", "Gemini"), _key("2", "Claude")]
        assert filter_records(records, "") == records

    def test_matches_primary_field_or_tag(self):
        gemini = _key("1", "Gemini", tags=["ai", "prod"])
        records = [gemini, _key("2", "Claude", tags=["dev"])]
        assert filter_records(records, "prod") == [gemini]
        assert filter_records(records, "gem") == [gemini]
        assert filter_records(records, "azure") == []

    def test_case_insensitive(self):
        github = _password("1", "GitHub", username="Alice@Example.com")
        assert filter_records([github], "github") == [github]
        assert filter_records([github], "ALICE") == [github]

    def test_note_searches_title_and_content(self):
        note = NoteRecord(id="n", title="Wifi", content="router passphrase")
        assert filter_records([note], "passphrase") == [note]
        assert filter_records([note], "wifi") == [note]


class TestCategory:
    def test_all_passes_everything(self):
        records = [_password("1", "GitHub"), _password("2", "Slack")]
        assert filter_records(records, category=ALL_CATEGORIES) == records

    def test_exact_platform_match(self):
        github = _password("1", "GitHub")
        records = [github, _password("2", "Slack"), _password("3", "GitHub Enterprise")]
        assert filter_records(records, category="GitHub") == [github]

    def test_query_and_category_are_conjunctive(self):
        work = _password("1", "GitHub", tags=["work"])
        records = [work, _password("2", "GitHub", tags=["personal"]), _password("3", "Slack", tags=["work"])]
        assert filter_records(records, "work", "GitHub") == [work]


class TestFrequency:
    def test_counts_records_per_tag_across_kinds(self):
        counts = tag_frequency(
            [_key("1", "Gemini", tags=["ai", "work"])],
            [_password("2", "GitHub", tags=["Work"])],
            [NoteRecord(id="3", title="t", content="c", tags=["personal"])],
        )
        assert counts == {"ai": 1, "work": 2, "personal": 1}

    def test_repeated_tag_on_one_record_counts_once(self):
        assert tag_frequency([_key("1", "Gemini", tags=["ai", "AI"])]) == {"ai": 1}

    def test_top_entries_ties_keep_first_seen_order(self):
        counts = tag_frequency([_key("1", "m", tags=["b", "a", "c"]), _key("2", "m", tags=["c"])])
        assert top_entries(counts, limit=3) == [("c", 2), ("b", 1), ("a", 1)]

    def test_platforms_sorted_and_distinct(self):
        records = [_password("1", "Slack"), _password("2", "GitHub"), _password("3", "Slack")]
        assert platforms(records) == ["GitHub", "Slack"]


class TestRecordIndex:
    def test_visible_and_len(self):
        records = [_password("1", "GitHub", tags=["work"]), _password("2", "Slack")]
        index = RecordIndex(records, query="work")
        assert [r.id for r in index.visible] == ["1"]
        assert len(index) == 1
        assert index.platforms == ["GitHub", "Slack"]

    def test_same_state_same_result(self):
        records = [_password(str(i), "GitHub" if i % 2 else "Slack", tags=["t"]) for i in range(6)]
        first = RecordIndex(records, "t", "GitHub").visible
        second = RecordIndex(list(records), "t", "GitHub").visible
        assert first == second
