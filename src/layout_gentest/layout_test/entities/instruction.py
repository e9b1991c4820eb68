from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_TOLERANCE = 1.0
APPEND_INDEX = -1
DEFAULT_VIEWPORT_WIDTH = 400
DEFAULT_VIEWPORT_HEIGHT = 600


class Axis(str, Enum):
    """Geometry quantities asserted after layout."""

    LEFT = "left"
    TOP = "top"
    WIDTH = "width"
    HEIGHT = "height"


class InstructionBase(BaseModel):
    """Common configuration for every IR instruction.

    Instructions are value objects: once built they are never mutated, so the
    models are frozen and unknown fields are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")


class DeclareTestSuite(InstructionBase):
    op: Literal["declare_test_suite"] = "declare_test_suite"
    suite_name: str


class DeclareTest(InstructionBase):
    op: Literal["declare_test"] = "declare_test"
    test_name: str


class CreateNode(InstructionBase):
    op: Literal["create_node"] = "create_node"
    node_id: str


class SetStyle(InstructionBase):
    op: Literal["set_style"] = "set_style"
    node_id: str
    property_name: str
    property_value: str


class InsertChild(InstructionBase):
    """parent_id -> child_id ownership edge; index is a placement hint only."""

    op: Literal["insert_child"] = "insert_child"
    parent_id: str
    child_id: str
    index: int = APPEND_INDEX


class MountRoot(InstructionBase):
    op: Literal["mount_root"] = "mount_root"
    root_id: str
    viewport_width: float = Field(default=DEFAULT_VIEWPORT_WIDTH, allow_inf_nan=False)
    viewport_height: float = Field(default=DEFAULT_VIEWPORT_HEIGHT, allow_inf_nan=False)


class AssertGeometry(InstructionBase):
    op: Literal["assert_geometry"] = "assert_geometry"
    node_id: str
    axis: Axis
    expected_value: float = Field(allow_inf_nan=False)
    tolerance: float = Field(default=DEFAULT_TOLERANCE, ge=0, allow_inf_nan=False)


class Annotate(InstructionBase):
    op: Literal["annotate"] = "annotate"
    label: str


Instruction = Annotated[
    DeclareTestSuite | DeclareTest | CreateNode | SetStyle | InsertChild | MountRoot | AssertGeometry | Annotate,
    Field(discriminator="op"),
]

# Scope instructions open suites and tests; everything else is a node-level step.
SCOPE_INSTRUCTIONS = (DeclareTestSuite, DeclareTest)

instruction_list_adapter = TypeAdapter(list[Instruction])


def parse_instructions(raw: list[dict]) -> list[Instruction]:
    """Validate a list of plain dicts (e.g. decoded JSON) into IR instructions."""
    return instruction_list_adapter.validate_python(raw)
