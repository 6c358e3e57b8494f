from dbstudio.errors.codes import ErrorCode

# None of these are transient; readiness failures carry Retry-After via NotReadyError.
ERROR_STATUS = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.METHOD_NOT_ALLOWED: 405,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.MALFORMED_ROW: 500,
    ErrorCode.BACKEND_FAILURE: 500,
}


def map_error(code: ErrorCode | None) -> int:
    if code is None:
        return 500
    return ERROR_STATUS.get(code, 500)
