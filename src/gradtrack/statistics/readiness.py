"""Progress toward graduation."""

import dataclasses
import logging
from typing import Iterable, Mapping, Optional, Union

import pandas as pd

from ..core import DEFAULT_TARGET_AU, MODULE_TYPES, Module, ModuleStatus, ModuleType
from .._util import check_number

logger = logging.getLogger(__name__)

COVERAGE_COLUMNS = ["type", "au", "count", "required_au", "percent_complete"]


# public classes =======================================================================


@dataclasses.dataclass(frozen=True)
class AUProgress:
    """AU split by module status.

    Modules which are neither completed nor in progress count as planned.

    """

    completed: float
    in_progress: float
    planned: float
    target_total: float

    @property
    def total(self) -> float:
        return self.completed + self.in_progress + self.planned


@dataclasses.dataclass(frozen=True)
class GraduationReadiness:
    """How far the student is from graduating.

    Attributes
    ----------
    completed_au, in_progress_au, planned_au : float
        AU of all modules, split by status.
    remaining_au : float
        AU still to be scheduled to reach the target. Never negative.
    target_au : float
        AU required to graduate.
    percent_complete : float
        Completed AU as a percentage of the target; zero when the target is
        not positive.
    type_coverage : pandas.DataFrame
        One row per module type with the columns ``type``, ``au`` and
        ``count`` (over completed modules only), ``required_au`` (``NaN``
        when no requirement is configured) and ``percent_complete`` (capped
        at 100; zero without a requirement). Sorted by AU, largest first,
        ties broken by type name.

    """

    completed_au: float
    in_progress_au: float
    planned_au: float
    remaining_au: float
    target_au: float
    percent_complete: float
    type_coverage: pd.DataFrame = dataclasses.field(compare=False)


# private helper functions =============================================================


def _valid_requirements(requirements) -> dict[ModuleType, float]:
    """Requirements keyed by module type. Unknown types and bad AU are skipped."""
    valid = {}
    for key, au in (requirements or {}).items():
        if au is None:
            continue
        try:
            module_type = ModuleType(key)
            check_number(f"Required AU for {key}", au, low=0, low_inclusive=False)
        except ValueError as exc:
            logger.warning("Ignoring module type requirement %r: %s", key, exc)
            continue
        valid[module_type] = au
    return valid


# public functions =====================================================================


def get_au_progress_data(
    modules: Iterable[Module], target_au: float = DEFAULT_TARGET_AU
) -> AUProgress:
    """Sum the AU of every module by status."""
    totals = {status: 0.0 for status in ModuleStatus}
    for module in modules:
        totals[module.status] += module.au

    return AUProgress(
        completed=totals[ModuleStatus.COMPLETED],
        in_progress=totals[ModuleStatus.IN_PROGRESS],
        planned=totals[ModuleStatus.NOT_STARTED],
        target_total=target_au,
    )


def get_type_coverage(
    modules: Iterable[Module],
    requirements: Optional[Mapping[Union[str, ModuleType], float]] = None,
) -> pd.DataFrame:
    """AU earned toward each module type.

    Every module type appears in the result, even those with no completed
    modules. See :class:`GraduationReadiness` for the columns.

    """
    requirements = _valid_requirements(requirements)

    earned = {t: [0.0, 0] for t in MODULE_TYPES}
    for module in modules:
        if module.is_completed:
            earned[module.type][0] += module.au
            earned[module.type][1] += 1

    rows = []
    for module_type, (au, count) in earned.items():
        required = requirements.get(module_type)
        if required:
            percent = min(100.0, au / required * 100)
        else:
            percent = 0.0
        rows.append((module_type.value, au, count, required, percent))

    coverage = pd.DataFrame(rows, columns=COVERAGE_COLUMNS).astype(
        {"au": float, "count": int, "required_au": float, "percent_complete": float}
    )
    return coverage.sort_values(
        ["au", "type"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)


def get_graduation_readiness(
    modules: Iterable[Module],
    target_au: float = DEFAULT_TARGET_AU,
    requirements: Optional[Mapping[Union[str, ModuleType], float]] = None,
) -> GraduationReadiness:
    """Summarize progress toward the graduation AU target.

    Parameters
    ----------
    modules : Iterable[Module]
        All of the student's modules, regardless of whether their semester is
        complete.
    target_au : float
        AU required to graduate. Default: 130.
    requirements : Optional[Mapping]
        Sparse mapping from module type to the AU required of that type.

    Returns
    -------
    GraduationReadiness

    """
    modules = list(modules)
    progress = get_au_progress_data(modules, target_au)

    if target_au > 0:
        percent_complete = progress.completed / target_au * 100
    else:
        percent_complete = 0.0

    return GraduationReadiness(
        completed_au=progress.completed,
        in_progress_au=progress.in_progress,
        planned_au=progress.planned,
        remaining_au=max(0.0, target_au - progress.total),
        target_au=target_au,
        percent_complete=percent_complete,
        type_coverage=get_type_coverage(modules, requirements),
    )
