from typing import List, Optional, Any, Dict, Union

from pydantic import BaseModel, StrictBool, StrictFloat, StrictInt, StrictStr

Scalar = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class RawStatementRequest(BaseModel):
    sql: Optional[StrictStr] = None
    params: Union[List[Scalar], Scalar] = None

    class Config:
        extra = "ignore"


class ActionRequest(BaseModel):
    # Left untyped so the gateway reports e.g. "Unknown action: 123".
    action: Optional[Any] = None
    table: Optional[Any] = None

    class Config:
        extra = "ignore"


class RowsResponse(BaseModel):
    rows: List[Dict[str, Any]]


class SuccessResponse(BaseModel):
    success: bool


class TablesResponse(BaseModel):
    tables: List[str]


class ColumnModel(BaseModel):
    name: str
    type: str
    nullable: bool


class ColumnsResponse(BaseModel):
    columns: List[ColumnModel]


class ErrorResponse(BaseModel):
    error: str
    code: Optional[str] = None
    request_id: Optional[str] = None
    details: List[str] | None = None
