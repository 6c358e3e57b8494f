from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

Param = Union[str, int, float, bool, None]
Params = Sequence[Param]

# Row shape is decided by the backend driver; the core never looks inside.
Row = Dict[str, Any]


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    type: str
    nullable: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "nullable": self.nullable}


@dataclass(frozen=True)
class RunResult:
    success: bool
    rowcount: Optional[int] = None


@dataclass(frozen=True)
class RawQueryRequest:
    """One caller request against the raw gateway."""

    sql: str
    params: List[Param]
