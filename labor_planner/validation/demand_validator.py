"""Pre-allocation checks for demand records."""

import logging
from typing import Iterable, List, Tuple

from labor_planner.models.assignment import DemandIssue
from labor_planner.models.demand import DemandRecord
from labor_planner.models.period import PlanningPeriod
from .errors import InvalidDemandError

logger = logging.getLogger(__name__)


def check_demand_record(record: DemandRecord, period: PlanningPeriod) -> None:
    """
    Verify a demand record can be allocated.

    Args:
        record: Demand record to check
        period: Period being planned

    Raises:
        InvalidDemandError: If the quantity is not positive, the model
            reference is unresolved, or the record belongs to another period
    """
    context = {"model_name": record.model_name, "quantity": record.quantity}

    if record.quantity <= 0:
        raise InvalidDemandError("Demand quantity must be positive", context)

    if record.model_reference is None:
        raise InvalidDemandError("Model reference is not resolved", context)

    if record.model_reference.model_name != record.model_name:
        context["reference_model_name"] = record.model_reference.model_name
        raise InvalidDemandError("Model reference does not match demand model", context)

    if record.period != period:
        context["record_period"] = record.period.key
        context["planning_period"] = period.key
        raise InvalidDemandError("Demand record belongs to a different period", context)


def split_valid_demand(
    demand: Iterable[DemandRecord],
    period: PlanningPeriod,
) -> Tuple[List[DemandRecord], List[DemandIssue]]:
    """
    Separate allocatable demand from invalid records.

    Input order is preserved for the valid records.

    Args:
        demand: Demand records handed over by the ingestion side
        period: Period being planned

    Returns:
        Tuple of (valid records, issues for rejected records)
    """
    valid: List[DemandRecord] = []
    issues: List[DemandIssue] = []

    for record in demand:
        try:
            check_demand_record(record, period)
        except InvalidDemandError as e:
            logger.warning(
                f"Skipping invalid demand for {record.model_name} "
                f"({record.quantity} units): {e.message}"
            )
            issues.append(DemandIssue(
                model_name=record.model_name,
                quantity=record.quantity,
                reason=e.message,
            ))
            continue
        valid.append(record)

    return valid, issues
