import re
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class RangeOp(str, Enum):
    LT = "$lt"
    GT = "$gt"
    GTE = "$gte"
    LTE = "$lte"


class RangeCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    field: str = Field(min_length=1)
    op: RangeOp
    value: int

    def to_mongo(self) -> Dict[str, Any]:
        return {self.field: {self.op.value: self.value}}


class TextMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    field: str = Field(min_length=1)
    substring: str = Field(min_length=1)
    case_insensitive: bool = True

    def to_mongo(self) -> Dict[str, Any]:
        cond: Dict[str, Any] = {"$regex": re.escape(self.substring)}
        if self.case_insensitive:
            cond["$options"] = "i"
        return {self.field: cond}


class And(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["and"] = "and"
    children: Tuple["FilterNode", ...] = Field(min_length=1)

    def to_mongo(self) -> Dict[str, Any]:
        # between-style ranges on one field render as a single field document
        if all(isinstance(c, RangeCondition) for c in self.children):
            fields = {c.field for c in self.children}
            ops = [c.op for c in self.children]
            if len(fields) == 1 and len(set(ops)) == len(ops):
                field = fields.pop()
                return {field: {c.op.value: c.value for c in self.children}}
        return {"$and": [c.to_mongo() for c in self.children]}


class Or(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["or"] = "or"
    children: Tuple["FilterNode", ...] = Field(min_length=1)

    def to_mongo(self) -> Dict[str, Any]:
        return {"$or": [c.to_mongo() for c in self.children]}


FilterNode = Union[RangeCondition, TextMatch, And, Or]

And.model_rebuild()
Or.model_rebuild()


class FilterExpression(BaseModel):
    """Root of a translated filter. An expression without a node matches every document."""

    model_config = ConfigDict(frozen=True)

    node: Optional[FilterNode] = None

    @classmethod
    def empty(cls) -> "FilterExpression":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.node is None

    def to_mongo(self) -> Dict[str, Any]:
        if self.node is None:
            return {}
        return self.node.to_mongo()
