"""Schema-tolerant field access for spreadsheet rows.

Rows come back from the sheet with whatever header spelling the sheet had at
the time (``NOME``, ``Nome``, ``nome_completo``, ``name`` ...). Instead of a
rigid mapping, each logical field lists exact key spellings in priority order
plus lowercase substrings to try on the remaining keys.
"""
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict, Sequence, Tuple

from salon.parsing import parse_amount

Spelling = Tuple[Tuple[str, ...], Tuple[str, ...]]


def get_field(record: Any, priorities: Sequence[str] = (), filters: Sequence[str] = ()) -> Any:
    """Return the first truthy value found in ``record``, or ``""``.

    Exact ``priorities`` are tried first, in order. Then every key of the
    record (in insertion order) whose lowercase form contains one of
    ``filters``. ``0``, ``False`` and ``""`` count as missing.
    """
    if not isinstance(record, Mapping):
        return ""

    for key in priorities:
        if key in record and record[key]:
            return record[key]

    if filters:
        for key in record:
            lowered = str(key).lower()
            if any(f in lowered for f in filters) and record[key]:
                return record[key]

    return ""


FIELD_SPELLINGS: Dict[str, Spelling] = {
    # clients
    "client.name": (
        ("NOME", "Nome", "nome", "CLIENTE", "Cliente",
         "NOME COMPLETO", "Nome Completo", "NOME COMPLETO *", "nome_completo",
         "name", "Name"),
        ("nome", "client", "name"),
    ),
    "client.phone": (
        ("TELEFONE", "Telefone", "telefone", "CELULAR", "Celular", "celular", "phone"),
        ("tel", "fone", "cel", "phone"),
    ),
    "client.notes": (
        ("OBS", "Obs", "OBSERVACOES", "Observações", "OBSERVAÇÕES", "observacoes", "notes"),
        ("obs", "observ", "note"),
    ),
    "client.registered_at": (
        ("DATA_CADASTRO", "DATA_CAD", "dataCadastro", "DataCadastro", "registered_at"),
        ("data", "cadast"),
    ),
    "client.id": (
        ("ID_CLIENTE", "idCliente", "ID", "id", "CODIGO", "Código", "codigo"),
        ("id", "cod"),
    ),
    # services
    "service.name": (
        ("NOME_SERVICO", "Nome_servico", "nomeServico", "NOME", "Nome", "nome",
         "SERVICO", "Serviço", "servico", "name", "Name"),
        ("servi", "nome", "name"),
    ),
    "service.category": (
        ("CATEGORIA", "Categoria", "categoria", "TIPO", "Tipo", "category"),
        ("categ",),
    ),
    "service.price": (
        ("PRECO_BASE", "Preco_base", "precoBase", "PREÇO", "Preço", "price", "Price"),
        ("preco", "preço", "price"),
    ),
    "service.active": (
        ("ATIVO", "Ativo", "ativo", "STATUS", "Status", "active"),
        ("ativo", "status", "active"),
    ),
    "service.registered_at": (
        ("DATA_CADASTRO", "dataCadastro", "registered_at"),
        ("cadast",),
    ),
    "service.id": (
        ("ID_SERVICO", "idServico", "ID", "id"),
        ("id_serv",),
    ),
    # appointments
    "appointment.client_id": (
        ("ID_CLIENTE", "idCliente", "IDCLIENTE", "clientId", "client_id"),
        ("id_client",),
    ),
    "appointment.client_name": (
        ("NOME_CLIENTE", "NomeCliente", "nomeCliente", "CLIENTE", "Cliente", "cliente", "client"),
        ("nome_cli", "nomecli", "client_name"),
    ),
    "appointment.service_id": (
        ("ID_SERVICO", "idServico", "IDSERVICO", "serviceId", "service_id"),
        ("id_serv",),
    ),
    "appointment.service_name": (
        ("NOME_SERVICO", "nomeServico", "SERVICO", "Serviço", "Servico", "servico", "service"),
        ("nome_serv", "nomeserv", "service_name"),
    ),
    "appointment.date": (
        ("DATA", "Data", "data", "date"),
        (),
    ),
    "appointment.amount": (
        ("VALOR_TOTAL", "valorTotal", "VALOR", "valor", "amount"),
        (),
    ),
    "appointment.payment_method": (
        ("FORMA_PAGAMENTO", "formaPagamento", "payment_method"),
        ("pagamento", "payment"),
    ),
    "appointment.notes": (
        ("OBSERVACOES", "OBS", "observacoes", "notes"),
        ("obs", "note"),
    ),
    # expenses
    "expense.date": (
        ("DATA", "Data", "data", "date"),
        (),
    ),
    "expense.category": (
        ("CATEGORIA", "Categoria", "categoria", "category"),
        ("categ",),
    ),
    "expense.description": (
        ("DESCRICAO", "Descrição", "descricao", "description"),
        ("descri",),
    ),
    "expense.amount": (
        ("VALOR", "valor", "VALOR_TOTAL", "valorTotal", "amount"),
        (),
    ),
    "expense.payment_method": (
        ("FORMA_PAGAMENTO", "formaPagamento", "payment_method"),
        ("pagamento", "payment"),
    ),
    "expense.notes": (
        ("OBSERVACOES", "OBS", "observacoes", "notes"),
        ("obs", "note"),
    ),
}

ACTIVE_VALUES = {True, "true", "TRUE", "Sim", "SIM", "Ativo", "ATIVO"}


def field(record: Any, name: str) -> Any:
    priorities, filters = FIELD_SPELLINGS[name]
    return get_field(record, priorities, filters)


def text_field(record: Any, name: str) -> str:
    value = field(record, name)
    return str(value).strip() if value != "" else ""


def identifier(kind: str, record: Any) -> str:
    """Effective identifier: the id column, falling back to the name."""
    return text_field(record, f"{kind}.id") or text_field(record, f"{kind}.name")


def service_price(record: Any) -> Decimal:
    price = parse_amount(field(record, "service.price"))
    return price if price is not None else Decimal("0")


def service_active(record: Any) -> bool:
    value = field(record, "service.active")
    try:
        return value in ACTIVE_VALUES
    except TypeError:
        # unhashable cell value
        return False
