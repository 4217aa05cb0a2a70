from datetime import datetime

from filegate.domain.file_storage import FileRecord, ObjectMeta
from filegate.domain.identity import Principal, Privilege
from tests.fixtures import make_principal, make_record


class TestPrincipal:
    def test_anonymous_has_no_privileges(self):
        anonymous = Principal.anonymous()
        assert anonymous.is_anonymous
        assert anonymous.priv == Privilege.NONE
        assert not anonymous.has_priv(Privilege.CREATE_FILE)

    def test_has_priv_checks_every_bit(self):
        principal = make_principal(priv=Privilege.CREATE_FILE)
        assert principal.has_priv(Privilege.CREATE_FILE)
        assert not principal.has_priv(Privilege.CREATE_FILE | Privilege.UNLIMITED_QUOTA)

    def test_document_round_trip(self):
        principal = make_principal(
            5, Privilege.CREATE_FILE | Privilege.EDIT_SYSTEM, [make_record("a.txt", 3)]
        )
        document = principal.to_dict()
        assert document["_id"] == 5
        assert document["priv"] == 3
        assert document["_files"][0]["_id"] == "a.txt"
        assert Principal.from_dict(document) == principal

    def test_from_dict_tolerates_missing_ledger(self):
        principal = Principal.from_dict({"_id": "9", "priv": 2})
        assert principal.id == 9
        assert principal.files == []

    def test_find_file(self):
        principal = make_principal(files=[make_record("a.txt")])
        assert principal.find_file("a.txt").name == "a.txt"
        assert principal.find_file("b.txt") is None


def test_file_record_from_meta():
    modified = datetime(2024, 1, 1)
    record = FileRecord.from_meta("a.txt", ObjectMeta(size=10, last_modified=modified, etag="e"))
    assert record == FileRecord("a.txt", 10, modified, "e")
    assert record.to_dict()["lastModified"] == "2024-01-01T00:00:00"
