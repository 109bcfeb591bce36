from decimal import Decimal

import pytest

from salon.domain import APPOINTMENT, CLIENT, EXPENSE, SERVICE
from salon.resolver import suggest_price
from salon.services import SalonService


@pytest.fixture
def salon(make_api, store):
    def _make(gets=None, post=None):
        api, session = make_api(gets=gets, post=post)
        return SalonService(api, store), session
    return _make


def test_empty_client_name_rejected_without_transport_call(salon):
    svc, session = salon()
    outcome = svc.create_client("  ", "1199")
    assert not outcome.ok
    assert outcome.message == "Client name is required."
    assert session.calls == []


def test_create_client_then_refresh(salon, store):
    svc, session = salon(gets={"listClientes": {"sucesso": True, "clientes": [{"ID_CLIENTE": "C_1", "NOME": "Ana"}]}})
    outcome = svc.create_client("Ana", "1199")
    assert outcome.ok
    assert [c["method"] for c in session.calls] == ["POST", "GET"]
    assert store.find_by_identifier(CLIENT, "C_1").is_some()


def test_selecting_service_fills_amount(salon, store):
    svc, _ = salon(gets={"listServicos": {"success": True, "services": [{"id": "S_1", "name": "Haircut", "price": 40}]}})
    assert svc.refresh(SERVICE).ok
    assert suggest_price(store, "S_1") == "40.00"


def test_server_rejection_keeps_store(salon, store):
    store.replace_all(SERVICE, [{"NOME_SERVICO": "Corte"}])
    svc, session = salon(post={"sucesso": False, "mensagem": "Nome duplicado"})
    outcome = svc.create_service("Corte", price="40")
    assert not outcome.ok
    assert outcome.message == "Error saving: Nome duplicado"
    assert len(session.posts()) == 1
    assert store.records(SERVICE) == ({"NOME_SERVICO": "Corte"},)


def test_network_failure_on_create(salon, connection_error):
    svc, _ = salon(post=connection_error)
    outcome = svc.create_expense(date="2025-03-01", category="Luz", amount="80")
    assert not outcome.ok
    assert outcome.message == "Could not reach the server."


def test_saved_but_refresh_failed_is_still_success(salon):
    svc, _ = salon(gets={"listAtendimentos": {"success": False, "message": "quota"}})
    outcome = svc.create_appointment(
        date="2025-03-05", client_ref="C_1", service_ref="S_1", amount="40", payment_method="Pix",
    )
    assert outcome.ok
    assert "quota" in outcome.message


def test_invalid_appointment_never_sent(salon):
    svc, session = salon()
    outcome = svc.create_appointment(
        date="2025-03-05", client_ref="C_1", service_ref="S_1", amount="0", payment_method="Pix",
    )
    assert not outcome.ok
    assert outcome.message == "Amount must be greater than zero."
    assert session.calls == []


def test_refresh_failure_leaves_list(salon, store):
    store.replace_all(EXPENSE, [{"DATA": "2025-03-01", "VALOR": 10}])
    svc, _ = salon(gets={})
    outcome = svc.refresh(EXPENSE)
    assert not outcome.ok
    assert len(store.records(EXPENSE)) == 1


def test_monthly_summary_from_store(salon, store):
    store.replace_all(APPOINTMENT, [
        {"date": "2025-03-05", "amount": 100},
        {"date": "2025-03-20", "amount": 50},
        {"date": "2025-02-28", "amount": 70},
    ])
    store.replace_all(EXPENSE, [{"date": "2025-03-10", "amount": "20.5"}])
    svc, session = salon()

    outcome = svc.monthly_summary("2025-03")

    assert outcome.ok
    assert outcome.summary.total_income == 150
    assert outcome.summary.total_expenses == Decimal("20.5")
    assert outcome.summary.net == Decimal("129.5")
    assert session.calls == []


def test_monthly_summary_bad_month(salon):
    svc, _ = salon()
    outcome = svc.monthly_summary("2025/03")
    assert not outcome.ok
    assert outcome.summary is None
