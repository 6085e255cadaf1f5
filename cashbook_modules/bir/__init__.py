"""
BIR Reports Module (``cashbook_modules.bir``).

Responsibility
--------------
Registry of supported Bureau of Internal Revenue forms and the per-form
data extracts: withholding summaries, the VAT return, the sales and
purchases listings, creditable withholding (2307), percentage tax, income
tax, the employee alphalist, supplier payments and the books of accounts
bundle.

Architecture position
---------------------
**Modules layer** -- read-only.  Extraction is pure (``extractor.py``);
``BirReportService`` resolves the period and fetches inputs.

Failure modes
-------------
* Unknown form code -> ``UnknownFormCodeError`` (a request error).
* Bad period -> ``InvalidPeriodError``.
"""

from cashbook_modules.bir.forms import (
    BIR_FORMS,
    BirFormDefinition,
    FilingFrequency,
    ReportShape,
    get_form,
    list_forms,
)
from cashbook_modules.bir.models import BirCompany, BirReport
from cashbook_modules.bir.service import BirReportService

__all__ = [
    "BirReportService",
    "BIR_FORMS",
    "BirFormDefinition",
    "FilingFrequency",
    "ReportShape",
    "get_form",
    "list_forms",
    "BirCompany",
    "BirReport",
]
