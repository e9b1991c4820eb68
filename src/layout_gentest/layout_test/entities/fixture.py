from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from layout_gentest.layout_test.entities.instruction import (SCOPE_INSTRUCTIONS,
                                                             DeclareTest,
                                                             DeclareTestSuite,
                                                             Instruction)
from layout_gentest.layout_test.errors import EmptyProgramError, ScopeStateError


class Fixture(BaseModel):
    """One layout-test input file found on disk."""

    name: str  # file stem, also used as the suite name
    path: Path
    html: str
    model_config = ConfigDict(frozen=True)


class TestCase(BaseModel):
    """A named test case and the node-level instructions that build and check it."""

    __test__ = False  # not a pytest class

    name: str
    instructions: list[Instruction] = Field(default_factory=list)
    model_config = ConfigDict(frozen=True)


class FixtureProgram(BaseModel):
    """The complete instruction program extracted for one fixture."""

    suite_name: str
    cases: list[TestCase] = Field(default_factory=list)
    model_config = ConfigDict(frozen=True)

    def to_instructions(self) -> list[Instruction]:
        """Flatten into DeclareTestSuite, then DeclareTest + body per case."""
        flat: list[Instruction] = [DeclareTestSuite(suite_name=self.suite_name)]
        for case in self.cases:
            flat.append(DeclareTest(test_name=case.name))
            flat.extend(case.instructions)
        return flat

    @classmethod
    def from_instructions(cls, instructions: list[Instruction]) -> FixtureProgram:
        """Fold a flat instruction stream back into cases."""
        if not instructions:
            raise EmptyProgramError("instruction sequence is empty")

        head, *rest = instructions
        if not isinstance(head, DeclareTestSuite):
            raise ScopeStateError(f"program must start with declare_test_suite, got {head.op}")

        cases: list[TestCase] = []
        current_name: str | None = None
        body: list[Instruction] = []
        for ins in rest:
            if isinstance(ins, DeclareTestSuite):
                raise ScopeStateError("only one declare_test_suite is allowed per program")
            if isinstance(ins, DeclareTest):
                if current_name is not None:
                    cases.append(TestCase(name=current_name, instructions=body))
                current_name, body = ins.test_name, []
                continue
            if current_name is None:
                raise ScopeStateError(f"{ins.op} appears before any declare_test")
            body.append(ins)

        if current_name is not None:
            cases.append(TestCase(name=current_name, instructions=body))

        return cls(suite_name=head.suite_name, cases=cases)


class FixtureResult(BaseModel):
    """Outcome of generating one fixture."""

    name: str
    ok: bool
    output_path: Path | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return not self.ok


def is_scope_instruction(ins: Instruction) -> bool:
    return isinstance(ins, SCOPE_INSTRUCTIONS)
