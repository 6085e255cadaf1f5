"""
Configuration Loader (``cashbook_config.loader``).

Responsibility
--------------
Loads the cashbook's YAML configuration: named account codes, reporting and
tax defaults, and the default chart of accounts seeded into new companies.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the kernel's domain
enums and exceptions only.  Module configs (``ReportingConfig``,
``TaxConfig``) are built from the raw sections with their ``from_dict``.

Invariants enforced
-------------------
* Every chart entry has a non-empty code, a name, and a known account type.
* Chart codes are unique.
* Parse problems raise ``ConfigurationError`` naming the source file.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Structurally invalid content  -> ``ConfigurationError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cashbook_kernel.domain.dtos import AccountType, ReportCategory
from cashbook_kernel.exceptions import ConfigurationError
from cashbook_kernel.logging_config import get_logger

logger = get_logger("config.loader")

DEFAULTS_DIR = Path(__file__).parent / "defaults"
DEFAULT_CONFIG_PATH = DEFAULTS_DIR / "ph_sme.yaml"


@dataclass(frozen=True)
class ChartSeed:
    """One account of a chart template."""

    code: str
    name: str
    account_type: AccountType

    @property
    def report_category(self) -> ReportCategory:
        if self.account_type.is_profit_loss:
            return ReportCategory.PROFIT_LOSS
        return ReportCategory.BALANCE_SHEET


@dataclass(frozen=True)
class CashbookSettings:
    """Parsed configuration file.  Sections stay as plain dicts."""

    account_codes: dict[str, Any] = field(default_factory=dict)
    reporting: dict[str, Any] = field(default_factory=dict)
    tax: dict[str, Any] = field(default_factory=dict)
    chart_of_accounts: tuple[ChartSeed, ...] = ()
    source: str | None = None

    def reporting_section(self) -> dict[str, Any]:
        """Reporting section with the account codes folded in."""
        return {**self.reporting, "account_codes": dict(self.account_codes)}


def load_yaml_file(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("top level must be a mapping", source=str(path))
    return data


def parse_chart(raw: list[dict[str, Any]], source: str | None = None) -> tuple[ChartSeed, ...]:
    seeds: list[ChartSeed] = []
    seen: set[str] = set()
    for i, item in enumerate(raw or []):
        if not isinstance(item, dict):
            raise ConfigurationError(f"chart entry #{i} must be a mapping", source=source)
        code = str(item.get("code", "")).strip()
        name = str(item.get("name", "")).strip()
        if not code or not name:
            raise ConfigurationError(f"chart entry #{i} needs code and name", source=source)
        if code in seen:
            raise ConfigurationError(f"duplicate chart code {code}", source=source)
        try:
            account_type = AccountType(str(item.get("type", "")).lower())
        except ValueError:
            raise ConfigurationError(
                f"chart entry {code} has unknown type {item.get('type')!r}",
                source=source,
            ) from None
        seen.add(code)
        seeds.append(ChartSeed(code=code, name=name, account_type=account_type))
    return tuple(seeds)


def parse_settings(data: dict[str, Any], source: str | None = None) -> CashbookSettings:
    for section in ("account_codes", "reporting", "tax"):
        value = data.get(section, {})
        if value is not None and not isinstance(value, dict):
            raise ConfigurationError(f"section '{section}' must be a mapping", source=source)
    return CashbookSettings(
        account_codes={k: str(v) for k, v in (data.get("account_codes") or {}).items()},
        reporting=dict(data.get("reporting") or {}),
        tax=dict(data.get("tax") or {}),
        chart_of_accounts=parse_chart(data.get("chart_of_accounts") or [], source),
        source=source,
    )


def load_settings(path: Path | str | None = None) -> CashbookSettings:
    """Load a configuration file; the bundled PH SME defaults when no path is given."""
    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    settings = parse_settings(load_yaml_file(p), source=str(p))
    logger.info(
        "settings_loaded",
        extra={
            "source": str(p),
            "chart_size": len(settings.chart_of_accounts),
        },
    )
    return settings


def default_chart() -> tuple[ChartSeed, ...]:
    """The default Philippine SME chart of accounts."""
    return load_settings().chart_of_accounts
