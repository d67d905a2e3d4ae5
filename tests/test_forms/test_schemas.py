import pytest

from adf.forms.schemas import ORGANIZATION, PARTICIPANT, PERSONAL, SCHEMAS, FieldKind, get_schema
from adf.ledger.keys import MY_PART, PART_OF


def test_schemas_are_registered_by_name():
    assert set(SCHEMAS) == {"organization", "participant", "personal"}


def test_get_schema_is_case_insensitive():
    assert get_schema(" Participant ") is PARTICIPANT


def test_get_schema_rejects_unknown_form():
    with pytest.raises(ValueError, match="Unknown form"):
        get_schema("corporation")


def test_collections_and_tags():
    assert ORGANIZATION.collection == MY_PART
    assert PARTICIPANT.collection == PART_OF
    assert PERSONAL.collection is None
    assert ORGANIZATION.has_tags and PARTICIPANT.has_tags
    assert not PERSONAL.has_tags


def _kinds(schema):
    return {spec.key: spec.kind for spec in schema.fields}


def test_field_kinds():
    assert _kinds(PARTICIPANT)["TelegramUserID"] is FieldKind.DIGITS
    assert _kinds(PARTICIPANT)["TimeTokenIssuer"] is FieldKind.ACCOUNT
    assert _kinds(ORGANIZATION)["ContractIPFS"] is FieldKind.IPFS
    assert "ContractIPFS" not in _kinds(PERSONAL)


def test_fields_follow_declaration_order():
    assert [spec.key for spec in PERSONAL.fields] == ["Name", "About", "Website"]
    assert ORGANIZATION.fields[-1].key == "ContractIPFS"


def test_every_schema_has_unique_keys_and_names():
    for schema in SCHEMAS.values():
        keys = [spec.key for spec in schema.fields]
        names = [spec.name for spec in schema.fields]
        assert len(set(keys)) == len(keys)
        assert len(set(names)) == len(names)
