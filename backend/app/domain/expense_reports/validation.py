"""
Explicit validation for expense report input.

Every check returns a tagged result, ``Ok(value)`` or ``Err(error)``,
instead of raising, so callers decide where the failure surfaces.
Structural checks are delegated to the Pydantic schemas; the rules here
span several fields or depend on the requested operation.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Generic, List, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from backend.app.core.exceptions import ValidationFailedError
from backend.app.domain.expense_reports.aggregator import ReportTotals
from backend.app.models.expense_report import ExpenseReport
from backend.app.models.report_enums import ReportStatus
from backend.app.schemas.expense_report import ExpenseReportCreate, ExpenseReportUpdate, PowerLine

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ValidationFailedError


Result = Union[Ok[T], Err]


def _field_error(loc: Sequence[Any], msg: str, error_type: str = "value_error") -> Dict[str, Any]:
    return {"loc": list(loc), "msg": msg, "type": error_type}


def unwrap(result: Result) -> T:
    """Return the value of an ``Ok`` or raise the error of an ``Err``."""
    if isinstance(result, Err):
        raise result.error
    return result.value


def parse(model: Type[M], data: Any) -> Result:
    """Run Pydantic validation and fold the outcome into a result."""
    try:
        return Ok(model.model_validate(data))
    except ValidationError as e:
        return Err(ValidationFailedError(errors=e.errors(include_url=False, include_context=False)))


def check_hotel_name(value: str, loc: Sequence[Any] = ("body", "hotelName")) -> Result:
    name = (value or "").strip()
    if not name:
        return Err(ValidationFailedError(errors=[_field_error(loc, "Hotel name is required", "missing")]))
    return Ok(name)


def check_power_readings(lines: Sequence[PowerLine]) -> Result:
    """A meter cannot run backwards: ``meterReading >= previousReading``."""
    errors: List[Dict[str, Any]] = []
    for index, line in enumerate(lines):
        if line.meter_reading < line.previous_reading:
            errors.append(_field_error(
                ("body", "powerConsumption", "consumptionDetails", index, "meterReading"),
                "Meter reading must not be lower than the previous reading",
            ))
    if errors:
        return Err(ValidationFailedError(errors=errors))
    return Ok(list(lines))


def check_content(payload: Union[ExpenseReportCreate, ExpenseReportUpdate]) -> Result:
    """
    Cross-field rules for a create or update body.

    Returns ``Ok(payload)`` with a trimmed hotel name, or one ``Err``
    carrying every violation found.
    """
    errors: List[Dict[str, Any]] = []
    updates: Dict[str, Any] = {}

    if isinstance(payload, ExpenseReportCreate) or payload.hotel_name is not None:
        result = check_hotel_name(payload.hotel_name)
        if isinstance(result, Err):
            errors.extend(result.error.details["errors"])
        else:
            updates["hotel_name"] = result.value

    if payload.power_consumption is not None:
        result = check_power_readings(payload.power_consumption.consumption_details)
        if isinstance(result, Err):
            errors.extend(result.error.details["errors"])

    if errors:
        return Err(ValidationFailedError(errors=errors))
    return Ok(payload.model_copy(update=updates))


# Where each derived figure lives on the wire, for error locations.
TOTAL_FIELDS = {
    "total_purchase_amount": ("body", "storeAndPurchase", "totalPurchaseAmount"),
    "total_bills_amount": ("body", "departmentBills", "totalBillsAmount"),
    "total_inventory_value": ("body", "storeInventory", "totalInventoryValue"),
    "total_power_cost": ("body", "powerConsumption", "totalPowerCost"),
    "total_expenses": ("body", "summary", "totalExpenses"),
    "total_revenue": ("body", "summary", "totalRevenue"),
    "net_profit": ("body", "summary", "netProfit"),
    "profit_margin": ("body", "summary", "profitMargin"),
}


def column_limit(name: str) -> Decimal:
    """Smallest magnitude the numeric column ``name`` can no longer store."""
    column_type = ExpenseReport.__table__.c[name].type
    return Decimal(10) ** (column_type.precision - column_type.scale)


def check_totals(totals: ReportTotals) -> Result:
    """Derived figures must fit the columns they are stored in."""
    errors: List[Dict[str, Any]] = []
    for name, loc in TOTAL_FIELDS.items():
        limit = column_limit(name)
        if abs(getattr(totals, name)) >= limit:
            errors.append(_field_error(loc, f"Value is out of range, must be less than {limit:,} in magnitude"))
    if errors:
        return Err(ValidationFailedError(message="Report figures are out of range", errors=errors))
    return Ok(totals)


def check_decision(status: ReportStatus) -> Result:
    """Only ``approved`` and ``rejected`` are decisions."""
    if status not in (ReportStatus.APPROVED, ReportStatus.REJECTED):
        return Err(ValidationFailedError(
            message="Status must be either approved or rejected",
            errors=[_field_error(("body", "status"), "Status must be either approved or rejected")],
        ))
    return Ok(status)
