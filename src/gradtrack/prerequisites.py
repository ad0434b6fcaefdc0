"""Checking module prerequisites."""

from typing import Iterable, Union

from .core import Module, PlannedModule


def unmet_prerequisites(
    module: Union[Module, PlannedModule], modules: Iterable[Module]
) -> list[str]:
    """The prerequisite codes of `module` which are not yet satisfied.

    A prerequisite is satisfied when one of `modules` has its code and is
    completed.

    Returns
    -------
    list[str]
        The unmet codes, in the order they are listed on `module`.

    """
    completed = {m.code for m in modules if m.is_completed}
    return [code for code in module.prerequisite_codes if code not in completed]


def modules_with_unmet_prerequisites(
    modules: Iterable[Module],
) -> dict[str, list[str]]:
    """Map the id of each module with unmet prerequisites to the unmet codes."""
    modules = list(modules)
    unmet = {}
    for module in modules:
        codes = unmet_prerequisites(module, modules)
        if codes:
            unmet[module.id] = codes
    return unmet
