import pytest

from salon.domain import APPOINTMENT, CLIENT, SERVICE
from salon.events import RECORDS_REPLACED
from salon.store import RecordStore, loose_equals


def test_replace_all_is_wholesale(store):
    store.replace_all(CLIENT, [{"ID_CLIENTE": "C_1", "NOME": "Ana"}, {"ID_CLIENTE": "C_2", "NOME": "Bia"}])
    store.replace_all(CLIENT, [{"ID_CLIENTE": "C_3", "NOME": "Carla"}])
    assert len(store.records(CLIENT)) == 1
    assert store.find_by_identifier(CLIENT, "C_1").is_none()


def test_replace_all_copies_input(store):
    rows = [{"id": "S_1", "name": "Corte"}]
    store.replace_all(SERVICE, rows)
    rows.append({"id": "S_2", "name": "Escova"})
    assert len(store.records(SERVICE)) == 1


def test_replace_all_tolerates_bad_payloads(store):
    store.replace_all(APPOINTMENT, None)
    assert store.records(APPOINTMENT) == ()
    store.replace_all(APPOINTMENT, [{"DATA": "2025-03-01"}, "junk", 3])
    assert len(store.records(APPOINTMENT)) == 1


def test_lists_are_independent(store):
    store.replace_all(CLIENT, [{"NOME": "Ana"}])
    assert store.records(SERVICE) == ()


def test_find_by_identifier_loose_equality(store):
    store.replace_all(CLIENT, [{"ID_CLIENTE": 7, "NOME": "Ana"}, {"ID_CLIENTE": "C_9", "NOME": "Bia"}])
    assert store.find_by_identifier(CLIENT, "7").get_or_else({})["NOME"] == "Ana"
    assert store.find_by_identifier(CLIENT, "C_9").get_or_else({})["NOME"] == "Bia"
    assert store.find_by_identifier(CLIENT, "C_404").is_none()
    assert store.find_by_identifier(CLIENT, "").is_none()


def test_find_by_identifier_uses_name_when_no_id(store):
    store.replace_all(SERVICE, [{"NOME_SERVICO": "Manicure", "PRECO_BASE": 30}])
    assert store.find_by_identifier(SERVICE, "Manicure").is_some()


def test_options_skip_nameless_rows(store):
    store.replace_all(SERVICE, [
        {"ID_SERVICO": "S_1", "NOME_SERVICO": "Corte"},
        {"PRECO_BASE": 10},
        {"NOME_SERVICO": "Escova"},
    ])
    assert store.options(SERVICE) == [("S_1", "Corte"), ("Escova", "Escova")]


def test_unknown_kind_rejected(store):
    with pytest.raises(ValueError):
        store.replace_all("invoice", [])
    with pytest.raises(ValueError):
        store.find_by_identifier(APPOINTMENT, "x")


def test_replace_publishes_event():
    store = RecordStore()
    seen = []
    store.bus.subscribe(RECORDS_REPLACED, lambda e: seen.append(e.payload))
    store.replace_all(CLIENT, [{"NOME": "Ana"}])
    assert seen == [{"kind": CLIENT, "count": 1}]


def test_loose_equals():
    assert loose_equals("1", 1)
    assert loose_equals(2.0, "2")
    assert loose_equals(" C_1 ", "C_1")
    assert not loose_equals("C_1", "C_2")
    assert not loose_equals(None, None)
    assert not loose_equals("", "")


def test_loose_equals_huge_int():
    assert not loose_equals("123", 10**400)
    assert loose_equals(10**400, 10**400)
