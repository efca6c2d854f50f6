import pytest

from emporium.db.record_id import InvalidRecordId, RecordId, key_of, ref, refs


def test_generate_produces_lowercase_alphanumeric_key():
    rid = RecordId.generate("BlogPost")
    assert rid.table == "BlogPost"
    assert len(rid.key) == 20
    assert rid.key.isalnum() and rid.key == rid.key.lower()
    assert str(rid) == f"BlogPost:{rid.key}"


def test_parse_accepts_bare_key_and_full_reference():
    assert RecordId.parse("abc", "BlogTag") == RecordId("BlogTag", "abc")
    assert RecordId.parse("BlogTag:abc", "BlogTag") == RecordId("BlogTag", "abc")
    assert RecordId.parse(RecordId("BlogTag", "abc"), "BlogTag").key == "abc"


@pytest.mark.parametrize("value", ["", "   ", None, "BlogTag:", "bad key", "semi;colon", "x" * 65])
def test_parse_rejects_malformed_values(value):
    with pytest.raises(InvalidRecordId):
        RecordId.parse(value, "BlogTag")


def test_parse_rejects_other_table():
    with pytest.raises(InvalidRecordId):
        RecordId.parse("User:abc", "BlogTag")
    with pytest.raises(InvalidRecordId):
        RecordId.parse(RecordId("User", "abc"), "BlogTag")


def test_helpers_normalise_references():
    assert ref("User", "u1") == "User:u1"
    assert ref("User", None) is None
    assert refs("BlogTag", ["a", "BlogTag:b"]) == ["BlogTag:a", "BlogTag:b"]
    assert refs("BlogTag", None) == []
    assert key_of("Chat:xyz") == "xyz"
    assert key_of("xyz") == "xyz"
