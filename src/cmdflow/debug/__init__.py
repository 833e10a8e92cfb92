"""Debugger process status and inspected variable models."""

from .status import DebugStatus, StatusMonitor, status_string
from .variables import (
    DEFAULT_GET_VAR_PARAMS,
    DEFAULT_VAR_LIST_PARAMS,
    Children,
    Kind,
    ListContent,
    Location,
    NestedMapContent,
    PrimitiveMapContent,
    Scalar,
    Variable,
    VarParams,
    sort_variables,
)

__all__ = [
    "DEFAULT_GET_VAR_PARAMS",
    "DEFAULT_VAR_LIST_PARAMS",
    "Children",
    "DebugStatus",
    "Kind",
    "ListContent",
    "Location",
    "NestedMapContent",
    "PrimitiveMapContent",
    "Scalar",
    "StatusMonitor",
    "VarParams",
    "Variable",
    "sort_variables",
    "status_string",
]
