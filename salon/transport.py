"""HTTP client for the spreadsheet web app.

The sheet exposes one URL. Lists and the monthly summary are GET requests
selected by ``?action=...``; creates are POSTs whose JSON body carries a
``tipoRegistro`` discriminator. Every response is an envelope
``{"success": bool, ...}``.
"""
import json
from contextlib import nullcontext
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests

from salon.aggregator import parse_month
from salon.domain import APPOINTMENT, CLIENT, EXPENSE, SERVICE, MonthlySummary
from salon.logging_setup import get_logger
from salon.normalizer import get_field
from salon.parsing import parse_amount
from salon.transforms import to_payload

logger = get_logger("salon.transport")

LIST_ACTIONS = {
    CLIENT: "listClientes",
    SERVICE: "listServicos",
    APPOINTMENT: "listAtendimentos",
    EXPENSE: "listDespesas",
}

# where each list lives in the envelope
LIST_KEYS = {
    CLIENT: ("clients", "clientes"),
    SERVICE: ("services", "servicos"),
    APPOINTMENT: ("appointments", "atendimentos"),
    EXPENSE: ("expenses", "despesas"),
}

SUMMARY_ACTION = "resumoMensal"


class TransportError(Exception):
    """The request failed or the response could not be decoded."""


class EnvelopeError(TransportError):
    """The server answered ``success: false``."""

    def __init__(self, message: str, envelope: Optional[dict] = None):
        super().__init__(message)
        self.envelope = envelope or {}


def envelope_ok(envelope: Any) -> bool:
    return bool(get_field(envelope, ("success", "sucesso")))


def envelope_message(envelope: Any) -> str:
    message = get_field(envelope, ("message", "mensagem", "erro", "error"))
    return str(message) if message else "Unknown response from the API"


class ApiClient:
    def __init__(self, url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        if not url:
            raise ValueError("api url is not configured (SALON_API_URL)")
        self.url = url
        self.timeout = timeout
        # an injected session is shared; otherwise every call opens its own,
        # since loader.refresh_all issues calls from several threads
        self.session = session

    def _session(self):
        return nullcontext(self.session) if self.session is not None else requests.Session()

    def _decode(self, response: requests.Response) -> Dict[str, Any]:
        if not response.ok:
            raise TransportError(f"HTTP error: {response.status_code}")
        try:
            data = response.json()
        except ValueError:
            logger.warning("non-JSON response: %.200s", response.text)
            raise TransportError("API response is not valid JSON.")
        if not isinstance(data, dict):
            raise TransportError("API response is not a JSON object.")
        if not envelope_ok(data):
            raise EnvelopeError(envelope_message(data), data)
        return data

    def _get(self, params: Dict[str, str]) -> Dict[str, Any]:
        logger.debug("GET %s", params)
        try:
            with self._session() as session:
                response = session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}") from e
        return self._decode(response)

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("POST %s", payload.get("tipoRegistro"))
        try:
            # text/plain keeps Apps Script from requiring a CORS preflight
            with self._session() as session:
                response = session.post(
                    self.url,
                    data=json.dumps(payload),
                    headers={"Content-Type": "text/plain;charset=utf-8"},
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}") from e
        return self._decode(response)

    def list_records(self, kind: str) -> List[dict]:
        data = self._get({"action": LIST_ACTIONS[kind]})
        for key in LIST_KEYS[kind]:
            if isinstance(data.get(key), list):
                return data[key]
        return []

    def create(self, obj: Any) -> Dict[str, Any]:
        """Send a validated domain object; returns the success envelope."""
        return self._post(to_payload(obj))

    def monthly_summary(self, month: str) -> MonthlySummary:
        parse_month(month)
        data = self._get({"action": SUMMARY_ACTION, "mes": month})

        def amount(*keys: str) -> Decimal:
            value = parse_amount(get_field(data, keys))
            return value if value is not None else Decimal("0")

        return MonthlySummary(
            month=month.strip(),
            total_income=amount("totalIncome", "totalEntradas"),
            total_expenses=amount("totalExpenses", "totalSaidas"),
        )
