import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Settings:
    api_url: str = ""
    timeout: float = 30.0
    currency: str = "BRL"
    locale: str = "pt_BR"
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls().override(
            api_url=env.get("SALON_API_URL"),
            timeout=env.get("SALON_TIMEOUT"),
            currency=env.get("SALON_CURRENCY"),
            locale=env.get("SALON_LOCALE"),
            log_level=env.get("SALON_LOG_LEVEL"),
        )

    def override(self, **values: Any) -> "Settings":
        """Copy with every non-blank value applied (e.g. from ``st.secrets``)."""
        changes = {}
        for key, value in values.items():
            if value is None or str(value).strip() == "":
                continue
            if key == "timeout":
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    raise ValueError(f"SALON_TIMEOUT must be a number, got {value!r}") from None
            else:
                value = str(value).strip()
            changes[key] = value
        return replace(self, **changes)
