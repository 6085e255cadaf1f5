"""
Typed Exception Hierarchy for the Cashbook.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from CashbookError:

    CashbookError (base)
    |
    +-- RequestError                       (caller sent bad parameters)
    |   +-- InvalidPeriodError
    |   +-- UnknownFormCodeError
    |
    +-- VoucherError
    |   +-- VoucherNotFoundError
    |   +-- InvalidStatusTransitionError
    |
    +-- CarryforwardError
    |   +-- InvalidCarryforwardAmountError
    |   +-- InsufficientCarryforwardError
    |   +-- DuplicateCarryforwardError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|-------------------------------------
Request         | INVALID_PERIOD                | Bad year / quarter / month
                | UNKNOWN_FORM_CODE             | BIR form code not in registry
----------------|-------------------------------|-------------------------------------
Voucher         | VOUCHER_NOT_FOUND             | Voucher ID doesn't exist
                | INVALID_STATUS_TRANSITION     | e.g. approving an approved voucher
----------------|-------------------------------|-------------------------------------
Carryforward    | INVALID_CARRYFORWARD_AMOUNT   | Negative original or applied amount
                | INSUFFICIENT_CARRYFORWARD     | Applying more than is available
                | DUPLICATE_CARRYFORWARD        | Second entry for the same year
----------------|-------------------------------|-------------------------------------
Configuration   | CONFIGURATION_ERROR           | Invalid config file or values

===============================================================================
HANDLING PATTERNS
===============================================================================

RequestError subclasses map to a 400 response at the application layer;
they are raised before any aggregation runs.

Missing data is never an error: a company or year without vouchers yields
empty report rows. A voucher that cannot be classified (no matching line,
no fallback account in the chart) is logged as ``classification_gap`` and
its amount left out of the report.

    try:
        report = bir_service.get_report_data(form_code, company_id, year)
    except RequestError as e:
        return {"error": e.code, "message": str(e)}, 400
"""


class CashbookError(Exception):
    """
    Base exception for all cashbook errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CASHBOOK_ERROR"


# Request exceptions


class RequestError(CashbookError):
    """Base exception for invalid caller parameters (400-equivalent)."""

    code: str = "REQUEST_ERROR"


class InvalidPeriodError(RequestError):
    """Year, quarter or month parameter is malformed or out of range."""

    code: str = "INVALID_PERIOD"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class UnknownFormCodeError(RequestError):
    """BIR form code is not in the form registry."""

    code: str = "UNKNOWN_FORM_CODE"

    def __init__(self, form_code: str):
        self.form_code = form_code
        super().__init__(f"Unknown form code: {form_code}")


# Voucher exceptions


class VoucherError(CashbookError):
    """Base exception for voucher lifecycle errors."""

    code: str = "VOUCHER_ERROR"


class VoucherNotFoundError(VoucherError):
    """Voucher with given ID was not found."""

    code: str = "VOUCHER_NOT_FOUND"

    def __init__(self, voucher_id: str, kind: str):
        self.voucher_id = voucher_id
        self.kind = kind
        super().__init__(f"{kind} voucher not found: {voucher_id}")


class InvalidStatusTransitionError(VoucherError):
    """Requested status change is not a transition of the voucher workflow."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, voucher_id: str, from_status: str, action: str):
        self.voucher_id = voucher_id
        self.from_status = from_status
        self.action = action
        super().__init__(
            f"Cannot {action} voucher {voucher_id} in status {from_status}"
        )


# Carryforward exceptions


class CarryforwardError(CashbookError):
    """Base exception for NOLCO / MCIT credit ledger errors."""

    code: str = "CARRYFORWARD_ERROR"


class InvalidCarryforwardAmountError(CarryforwardError):
    """Amount is negative or otherwise unusable."""

    code: str = "INVALID_CARRYFORWARD_AMOUNT"

    def __init__(self, kind: str, amount: str):
        self.kind = kind
        self.amount = amount
        super().__init__(f"Invalid {kind} amount: {amount}")


class InsufficientCarryforwardError(CarryforwardError):
    """Attempted to apply more than the available unexpired balance."""

    code: str = "INSUFFICIENT_CARRYFORWARD"

    def __init__(self, kind: str, requested: str, available: str, target_year: int):
        self.kind = kind
        self.requested = requested
        self.available = available
        self.target_year = target_year
        super().__init__(
            f"Cannot apply {requested} of {kind} for {target_year}: "
            f"only {available} available"
        )


class DuplicateCarryforwardError(CarryforwardError):
    """An entry already exists for the company and origination year."""

    code: str = "DUPLICATE_CARRYFORWARD"

    def __init__(self, kind: str, company_id: str, origin_year: int):
        self.kind = kind
        self.company_id = company_id
        self.origin_year = origin_year
        super().__init__(
            f"{kind} entry for {origin_year} already exists "
            f"for company {company_id}"
        )


# Configuration exceptions


class ConfigurationError(CashbookError):
    """Configuration file or values are invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message if source is None else f"{source}: {message}")
