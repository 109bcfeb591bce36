from typing import Any, Dict, Iterable, Tuple

from salon.domain import (
    APPOINTMENT, CLIENT, EXPENSE, SERVICE,
    Appointment, Client, Expense, Service,
)
from salon.normalizer import identifier, service_active, service_price, text_field
from salon.parsing import parse_amount, parse_date
from salon.resolver import DisplayNameCache

# ``tipoRegistro`` values understood by the sheet's POST handler
RECORD_TYPES = {
    CLIENT: "cliente",
    SERVICE: "servico",
    APPOINTMENT: "atendimento",
    EXPENSE: "despesa",
}


def to_client(record: Any) -> Client:
    return Client(
        id=identifier(CLIENT, record),
        name=text_field(record, "client.name"),
        phone=text_field(record, "client.phone"),
        notes=text_field(record, "client.notes"),
        registered_at=text_field(record, "client.registered_at"),
    )


def to_service(record: Any) -> Service:
    return Service(
        id=identifier(SERVICE, record),
        name=text_field(record, "service.name"),
        category=text_field(record, "service.category"),
        price=service_price(record),
        active=service_active(record),
        registered_at=text_field(record, "service.registered_at"),
    )


def clients(records: Iterable[Any]) -> Tuple[Client, ...]:
    return tuple(to_client(r) for r in records)


def services(records: Iterable[Any]) -> Tuple[Service, ...]:
    return tuple(to_service(r) for r in records)


def appointment_row(record: Any, names: DisplayNameCache) -> Dict[str, Any]:
    """Display row for the appointment history table."""
    return {
        "date": parse_date(text_field(record, "appointment.date")),
        "client": names.client_name(record),
        "service": names.service_name(record),
        "amount": parse_amount(text_field(record, "appointment.amount")),
        "payment_method": text_field(record, "appointment.payment_method"),
        "notes": text_field(record, "appointment.notes"),
    }


def expense_row(record: Any) -> Dict[str, Any]:
    return {
        "date": parse_date(text_field(record, "expense.date")),
        "category": text_field(record, "expense.category"),
        "description": text_field(record, "expense.description"),
        "amount": parse_amount(text_field(record, "expense.amount")),
        "payment_method": text_field(record, "expense.payment_method"),
        "notes": text_field(record, "expense.notes"),
    }


def to_payload(obj: Any) -> Dict[str, Any]:
    """Wire body for the sheet's POST handler."""
    if isinstance(obj, Client):
        return {
            "tipoRegistro": RECORD_TYPES[CLIENT],
            "idCliente": obj.id,
            "nome": obj.name,
            "telefone": obj.phone,
            "observacoes": obj.notes,
        }
    if isinstance(obj, Service):
        return {
            "tipoRegistro": RECORD_TYPES[SERVICE],
            "idServico": obj.id,
            "nomeServico": obj.name,
            "categoria": obj.category,
            "precoBase": float(obj.price),
            "ativo": obj.active,
        }
    if isinstance(obj, Appointment):
        return {
            "tipoRegistro": RECORD_TYPES[APPOINTMENT],
            "data": obj.date.isoformat(),
            "idCliente": obj.client_ref,
            "nomeCliente": obj.client_name,
            "idServico": obj.service_ref,
            "nomeServico": obj.service_name,
            "valorTotal": float(obj.amount),
            "formaPagamento": obj.payment_method,
            "observacoes": obj.notes,
        }
    if isinstance(obj, Expense):
        return {
            "tipoRegistro": RECORD_TYPES[EXPENSE],
            "data": obj.date.isoformat(),
            "categoria": obj.category,
            "descricao": obj.description,
            "valor": float(obj.amount),
            "formaPagamento": obj.payment_method,
            "observacoes": obj.notes,
        }
    raise TypeError(f"no payload mapping for {type(obj).__name__}")
