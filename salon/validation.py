"""Form validation. Nothing here touches the network or the store.

Each validator returns ``Right(<domain object>)`` ready to be sent, or
``Left({"error", "message", "field"})`` describing the first problem found.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from salon.domain import CLIENT, SERVICE, Appointment, Client, Expense, Service, synthesize_id
from salon.functional import Either, Left, Right
from salon.parsing import parse_amount, parse_date


def _clean(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _missing(field_name: str, message: str) -> Left:
    return Left({"error": "missing_field", "message": message, "field": field_name})


def _invalid(field_name: str, message: str) -> Left:
    return Left({"error": "invalid_value", "message": message, "field": field_name})


def validate_client(name: Any, phone: Any = "", notes: Any = "", now: Optional[datetime] = None) -> Either[dict, Client]:
    name = _clean(name)
    if not name:
        return _missing("name", "Client name is required.")
    return Right(Client(
        id=synthesize_id(CLIENT, now),
        name=name,
        phone=_clean(phone),
        notes=_clean(notes),
        registered_at=(now or datetime.now()).isoformat(timespec="seconds"),
    ))


def validate_service(
    name: Any,
    category: Any = "",
    price: Any = "",
    active: bool = True,
    now: Optional[datetime] = None,
) -> Either[dict, Service]:
    name = _clean(name)
    if not name:
        return _missing("name", "Service name is required.")

    # a blank price means "no base price"
    parsed = Decimal("0") if _clean(price) == "" else parse_amount(price)
    if parsed is None or parsed < 0:
        return _invalid("price", "Invalid price.")

    return Right(Service(
        id=synthesize_id(SERVICE, now),
        name=name,
        category=_clean(category),
        price=parsed,
        active=bool(active),
        registered_at=(now or datetime.now()).isoformat(timespec="seconds"),
    ))


def validate_appointment(
    date: Any,
    client_ref: Any,
    service_ref: Any,
    amount: Any,
    payment_method: Any,
    notes: Any = "",
    client_name: Any = "",
    service_name: Any = "",
) -> Either[dict, Appointment]:
    required = {
        "date": date,
        "client_ref": client_ref,
        "service_ref": service_ref,
        "amount": amount,
        "payment_method": payment_method,
    }
    for field_name, value in required.items():
        if not _clean(value):
            return _missing(field_name, "Fill in all required appointment fields.")

    parsed_date = parse_date(date if not isinstance(date, str) else date.strip())
    if parsed_date is None:
        return _invalid("date", "Invalid date.")

    parsed_amount = parse_amount(amount)
    if parsed_amount is None or parsed_amount <= 0:
        return _invalid("amount", "Amount must be greater than zero.")

    return Right(Appointment(
        date=parsed_date,
        client_ref=_clean(client_ref),
        service_ref=_clean(service_ref),
        amount=parsed_amount,
        payment_method=_clean(payment_method),
        notes=_clean(notes),
        client_name=_clean(client_name),
        service_name=_clean(service_name),
    ))


def validate_expense(
    date: Any,
    category: Any,
    amount: Any,
    description: Any = "",
    payment_method: Any = "",
    notes: Any = "",
) -> Either[dict, Expense]:
    if not _clean(date):
        return _missing("date", "Expense date is required.")
    if not _clean(category):
        return _missing("category", "Expense category is required.")

    parsed_date = parse_date(date if not isinstance(date, str) else date.strip())
    if parsed_date is None:
        return _invalid("date", "Invalid date.")

    parsed_amount = parse_amount(amount)
    if parsed_amount is None or parsed_amount <= 0:
        return _invalid("amount", "Amount must be greater than zero.")

    return Right(Expense(
        date=parsed_date,
        category=_clean(category),
        amount=parsed_amount,
        description=_clean(description),
        payment_method=_clean(payment_method),
        notes=_clean(notes),
    ))
