# utils/helpers.py
from typing import Optional, Union

Number = Union[float, int]


def or_zero(v: Optional[Number]) -> float:
    """Absent measure -> 0.0. Present values are returned as float."""
    return 0.0 if v is None else float(v)


def or_zero_int(v: Optional[int]) -> int:
    """Absent count -> 0."""
    return 0 if v is None else int(v)


def or_false(v: Optional[bool]) -> bool:
    """Absent flag -> False."""
    return bool(v) if v is not None else False


def is_reference(local_id: Optional[int]) -> bool:
    """
    True if `local_id` can point at a row.

    NULL and 0 are both "no reference": the legacy repair pass rewrites
    NULL foreign keys to 0, so 0 never names a real row.
    """
    return local_id is not None and local_id > 0
