import datetime
import itertools

import gradtrack


def completed(code, au, grade, year=1, semester=1, type="Core", **kwargs):
    """A completed module."""
    return gradtrack.Module(
        code=code,
        name=f"Module {code}",
        au=au,
        grade=grade,
        type=type,
        year=year,
        semester=semester,
        status="Completed",
        **kwargs,
    )


def pending(code, au, status="In Progress", year=1, semester=1, type="Core", **kwargs):
    """A module which is not yet completed."""
    return gradtrack.Module(
        code=code,
        name=f"Module {code}",
        au=au,
        type=type,
        year=year,
        semester=semester,
        status=status,
        **kwargs,
    )


def ticking_clock():
    """A clock whose every reading is one second after the previous one."""
    start = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
    seconds = itertools.count()

    def clock():
        now = start + datetime.timedelta(seconds=next(seconds))
        return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    return clock
