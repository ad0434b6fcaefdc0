"""Mapping letter grades to grade points."""

import collections
from typing import Optional

import pandas as pd


# grade tables =========================================================================

GRADE_POINTS = collections.OrderedDict(
    [
        ("A+", 5.0),
        ("A", 5.0),
        ("A-", 4.5),
        ("B+", 4.0),
        ("B", 3.5),
        ("B-", 3.0),
        ("C+", 2.5),
        ("C", 2.0),
        ("D+", 1.5),
        ("D", 1.0),
        ("F", 0.0),
    ]
)
"""Grade points for each letter grade, ordered from the highest rank to the lowest."""

#: the letter grades which carry grade points, in rank order
GRADE_ORDER = tuple(GRADE_POINTS)

#: grades which count toward AU but never toward the GPA or the grade distribution
EXCLUDED_GRADES = frozenset(["S", "U", "P", "Pass", "Fail", "EX", "TC", "IP", "LOA"])

#: every label a module's grade may take
VALID_GRADES = frozenset(GRADE_ORDER) | EXCLUDED_GRADES

#: rank of each graded letter; A+ outranks A even though both are worth 5.0
GRADE_RANK = {letter: len(GRADE_ORDER) - i for i, letter in enumerate(GRADE_ORDER)}

CLASSIFICATIONS = collections.OrderedDict(
    [
        ("First Class Honours", 4.5),
        ("Second Class Upper", 4.0),
        ("Second Class Lower", 3.5),
        ("Third Class", 3.0),
        ("Pass", 2.0),
    ]
)
"""Minimum CGPA for each degree classification."""


# public functions =====================================================================


def grade_point(grade: Optional[str]) -> Optional[float]:
    """The grade point of a letter grade.

    Returns ``None`` when the grade is missing or excluded from GPA math.

    """
    if grade is None or grade in EXCLUDED_GRADES:
        return None
    return GRADE_POINTS.get(grade)


def is_graded(grade: Optional[str]) -> bool:
    """Whether a grade contributes to the GPA."""
    return grade_point(grade) is not None


def map_grades_to_points(grades: pd.Series) -> pd.Series:
    """Map each letter grade to its grade point.

    Parameters
    ----------
    grades : pandas.Series
        A series of letter grades. Missing entries may be ``None``.

    Returns
    -------
    pandas.Series
        A float series of the same index. Missing and excluded grades become
        ``NaN``.

    """
    return grades.map(GRADE_POINTS).astype(float)


def count_grades(grades: pd.Series) -> pd.Series:
    """Counts the frequency of each graded letter.

    Excluded grades and missing grades are not counted.

    Parameters
    ----------
    grades : pandas.Series
        The letter grades.

    Returns
    -------
    pandas.Series
        The count of each letter grade, indexed by letter. The letters are
        guaranteed to be in rank order, from highest to lowest, and letters
        which never occur are omitted.

    """
    grades = grades[grades.isin(GRADE_ORDER)]
    counts = grades.value_counts().reindex(list(GRADE_ORDER), fill_value=0).astype(int)
    counts = counts[counts > 0]
    counts.index.name = "grade"
    counts.name = "count"
    return counts


def classify(gpa: float) -> str:
    """The degree classification earned by a CGPA."""
    for classification, threshold in CLASSIFICATIONS.items():
        if gpa >= threshold:
            return classification
    return "Academic Warning/Termination"
