from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

CLIENT = "client"
SERVICE = "service"
APPOINTMENT = "appointment"
EXPENSE = "expense"

KINDS = (CLIENT, SERVICE, APPOINTMENT, EXPENSE)

# kinds that other rows point at by identifier
REFERENCEABLE = (CLIENT, SERVICE)

# prefixes the backend uses when it synthesizes an identifier
ID_PREFIXES = {
    CLIENT: "C_",
    SERVICE: "S_",
    EXPENSE: "D_",
}

UNKNOWN = "Unknown"


def synthesize_id(kind: str, now: Optional[datetime] = None) -> str:
    """Build ``<prefix><epoch millis>``, e.g. ``C_1732838400000``."""
    now = now or datetime.now()
    return f"{ID_PREFIXES[kind]}{int(now.timestamp() * 1000)}"


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    phone: str = ""
    notes: str = ""
    registered_at: str = ""


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    category: str = ""
    price: Decimal = Decimal("0")
    active: bool = True
    registered_at: str = ""


@dataclass(frozen=True)
class Appointment:
    date: date
    client_ref: str      # identifier, or the client name for older rows
    service_ref: str
    amount: Decimal
    payment_method: str
    notes: str = ""
    client_name: str = ""
    service_name: str = ""


@dataclass(frozen=True)
class Expense:
    date: date
    category: str
    amount: Decimal
    description: str = ""
    payment_method: str = ""
    notes: str = ""


@dataclass(frozen=True)
class MonthlySummary:
    month: str   # YYYY-MM
    total_income: Decimal
    total_expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expenses

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "net": self.net,
        }
