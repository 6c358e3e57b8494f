from enum import Enum


class ErrorCode(str, Enum):
    # --- Caller input ---
    INVALID_REQUEST = "INVALID_REQUEST"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    NOT_FOUND = "NOT_FOUND"

    # --- Introspection ---
    MALFORMED_ROW = "MALFORMED_ROW"

    # --- Executor / DB ---
    BACKEND_FAILURE = "BACKEND_FAILURE"
