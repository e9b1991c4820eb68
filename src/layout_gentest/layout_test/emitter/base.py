"""Backend-agnostic emitter contract.

An ``Emitter`` turns one fixture's IR program into source text. It owns the
indentation state and the line buffer; concrete backends only supply the
target-syntax lines for each step through the ``*_lines`` / ``render_*`` hooks.

Indentation is changed exclusively by the prologue/epilogue pairs.
``handle()`` validates node references (declared before use, single parent, no
cycles, one mount per test) before delegating to the backend. Closing a test
checks that every node it created is reachable from its mounted root.

The suite placeholder is replaced only in prologue/epilogue boilerplate;
lines rendered from instructions are pushed verbatim.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import ClassVar

from layout_gentest.layout_test.emitter.helpers.formatting import (IndentState,
                                                                   LineBuffer,
                                                                   indent_line,
                                                                   split_block,
                                                                   substitute_placeholder)
from layout_gentest.layout_test.entities.fixture import FixtureProgram, is_scope_instruction
from layout_gentest.layout_test.entities.instruction import (APPEND_INDEX,
                                                             Annotate,
                                                             AssertGeometry,
                                                             CreateNode,
                                                             DeclareTest,
                                                             DeclareTestSuite,
                                                             InsertChild,
                                                             Instruction,
                                                             MountRoot,
                                                             SetStyle)
from layout_gentest.layout_test.errors import (EmptyProgramError,
                                               NodeReferenceError,
                                               ScopeStateError)

logger = logging.getLogger(__name__)

Lines = str | list[str]


class Emitter(ABC):
    """Render one fixture's instruction program into textual test source."""

    name: ClassVar[str] = ""
    extension: ClassVar[str] = ""

    def __init__(
        self,
        suite_name: str | None = None,
        indent_unit: str = "  ",
        placeholder: str = "",
        honor_insert_index: bool = False,
    ):
        self.suite_name = suite_name
        self.placeholder = placeholder
        self.honor_insert_index = honor_insert_index
        self._indent = IndentState(indent_unit)
        self._buffer = LineBuffer()
        self._scopes: list[str] = []
        self._prologue_done = False
        self._test_names: set[str] = set()
        self._reset_test_state()

        self._dispatch: dict[type, Callable[[Instruction], Lines]] = {
            CreateNode: self._handle_create_node,
            SetStyle: self._handle_set_style,
            InsertChild: self._handle_insert_child,
            MountRoot: self._handle_mount_root,
            AssertGeometry: self._handle_assert_geometry,
            Annotate: self._handle_annotate,
        }

    # ──── backend hooks ───────────────────────────────────────
    @abstractmethod
    def prologue_lines(self) -> Lines: ...

    @abstractmethod
    def epilogue_lines(self) -> Lines: ...

    @abstractmethod
    def test_prologue_lines(self, test_name: str) -> Lines: ...

    @abstractmethod
    def test_epilogue_lines(self) -> Lines: ...

    @abstractmethod
    def render_create_node(self, ins: CreateNode) -> Lines: ...

    @abstractmethod
    def render_set_style(self, ins: SetStyle) -> Lines: ...

    @abstractmethod
    def render_insert_child(self, ins: InsertChild, index: int) -> Lines: ...

    @abstractmethod
    def render_mount_root(self, ins: MountRoot) -> Lines: ...

    @abstractmethod
    def render_assert_geometry(self, ins: AssertGeometry) -> Lines: ...

    @abstractmethod
    def render_annotate(self, ins: Annotate) -> Lines: ...

    # ──── buffer ──────────────────────────────────────────────
    def push(self, lines: Lines) -> None:
        """Append lines at the current depth, verbatim."""
        prefix = self._indent.prefix
        for line in split_block(lines):
            self._buffer.append(indent_line(line, prefix))

    def push_boilerplate(self, lines: Lines) -> None:
        """Append prologue/epilogue lines with the suite placeholder replaced."""
        self.push([substitute_placeholder(line, self.placeholder, self.suite_name or "")
                   for line in split_block(lines)])

    def push_indent(self) -> None:
        self._indent.push()

    def pop_indent(self) -> None:
        self._indent.pop()

    @property
    def depth(self) -> int:
        return self._indent.depth

    @property
    def lines(self) -> tuple[str, ...]:
        return self._buffer.lines

    # ──── contract ────────────────────────────────────────────
    def emit_prologue(self, suite_name: str | None = None) -> None:
        if self._prologue_done:
            raise ScopeStateError("prologue already emitted; an emitter renders exactly one suite")
        if suite_name is not None:
            self.suite_name = suite_name
        if not self.suite_name:
            raise ScopeStateError("cannot open a test suite without a name")

        self.push_boilerplate(self.prologue_lines())
        self.push_indent()
        self._scopes.append("suite")
        self._prologue_done = True

    def emit_test_prologue(self, test_name: str) -> None:
        if self._scopes != ["suite"]:
            raise ScopeStateError(f"cannot open test '{test_name}': scopes open are {self._scopes}")
        if test_name in self._test_names:
            raise ScopeStateError(f"test '{test_name}' is declared twice in suite '{self.suite_name}'")

        self._test_names.add(test_name)
        self._reset_test_state()
        self._current_test = test_name
        self.push_boilerplate(self.test_prologue_lines(test_name))
        self.push_indent()
        self._scopes.append("test")

    def emit_test_epilogue(self) -> None:
        if not self._scopes or self._scopes[-1] != "test":
            raise ScopeStateError("unbalanced scope: test epilogue without a matching test prologue")
        self._require_rooted()
        self._scopes.pop()
        self.pop_indent()
        self.push_boilerplate(self.test_epilogue_lines())

    def emit_epilogue(self) -> None:
        if self._scopes != ["suite"]:
            raise ScopeStateError(f"unbalanced scope: suite epilogue with scopes {self._scopes} open")
        self._scopes.pop()
        self.pop_indent()
        self.push_boilerplate(self.epilogue_lines())

    def handle(self, ins: Instruction) -> None:
        """Validate one node-level instruction and append its rendered lines."""
        if is_scope_instruction(ins):
            raise ScopeStateError(f"{ins.op} opens a scope; use the prologue methods or emit_program()")
        if not self._scopes or self._scopes[-1] != "test":
            raise ScopeStateError(f"{ins.op} outside of a test case")

        handler = self._dispatch.get(type(ins))
        if handler is None:
            raise ScopeStateError(f"no handler for instruction {ins.op}")
        self.push(handler(ins))

    def render(self) -> str:
        if self._scopes:
            raise ScopeStateError(f"cannot render while scopes {self._scopes} are open")
        if not self._prologue_done:
            raise EmptyProgramError("nothing has been emitted")
        return self._buffer.text()

    # ──── drivers ─────────────────────────────────────────────
    def emit_program(self, instructions: Iterable[Instruction]) -> str:
        """Render a flat stream: DeclareTestSuite, then DeclareTest + body per case."""
        instructions = list(instructions)
        if not instructions:
            raise EmptyProgramError("refusing to render an empty instruction sequence")

        head, *rest = instructions
        if not isinstance(head, DeclareTestSuite):
            raise ScopeStateError(f"program must start with declare_test_suite, got {head.op}")

        self.emit_prologue(head.suite_name)
        for ins in rest:
            if isinstance(ins, DeclareTestSuite):
                raise ScopeStateError("only one declare_test_suite is allowed per output unit")
            if isinstance(ins, DeclareTest):
                if self._scopes[-1] == "test":
                    self.emit_test_epilogue()
                self.emit_test_prologue(ins.test_name)
                continue
            self.handle(ins)

        if self._scopes and self._scopes[-1] == "test":
            self.emit_test_epilogue()
        self.emit_epilogue()

        logger.debug("Rendered suite %s: %d test(s), %d line(s)",
                     self.suite_name, len(self._test_names), len(self._buffer))
        return self.render()

    def emit_fixture(self, program: FixtureProgram) -> str:
        return self.emit_program(program.to_instructions())

    # ──── node bookkeeping ────────────────────────────────────
    @property
    def node_parents(self) -> dict[str, str]:
        """child -> parent edges of the current test case."""
        return dict(self._parents)

    @property
    def mounted_root(self) -> str | None:
        return self._mounted_root

    def _reset_test_state(self) -> None:
        self._declared: set[str] = set()
        self._parents: dict[str, str] = {}
        self._mounted_root: str | None = None
        self._current_test: str | None = None

    def _require_declared(self, node_id: str) -> None:
        if node_id not in self._declared:
            raise NodeReferenceError(node_id, "node is used before create_node")

    def _require_rooted(self) -> None:
        """Every node of the closing test must hang off its mounted root."""
        if not self._declared:
            return
        if self._mounted_root is None:
            raise ScopeStateError(f"test '{self._current_test}' creates nodes but never mounts a root")
        for node_id in sorted(self._declared):
            top = node_id
            while top in self._parents:
                top = self._parents[top]
            if top != self._mounted_root:
                raise NodeReferenceError(node_id, f"node is not attached under mounted root '{self._mounted_root}'")

    def _handle_create_node(self, ins: CreateNode) -> Lines:
        if ins.node_id in self._declared:
            raise NodeReferenceError(ins.node_id, "node is declared twice in the same test")
        self._declared.add(ins.node_id)
        return self.render_create_node(ins)

    def _handle_set_style(self, ins: SetStyle) -> Lines:
        self._require_declared(ins.node_id)
        return self.render_set_style(ins)

    def _handle_insert_child(self, ins: InsertChild) -> Lines:
        self._require_declared(ins.parent_id)
        self._require_declared(ins.child_id)
        if ins.child_id in self._parents:
            raise NodeReferenceError(ins.child_id, f"node already inserted under '{self._parents[ins.child_id]}'")
        if ins.child_id == self._mounted_root:
            raise NodeReferenceError(ins.child_id, "mounted root cannot become a child")

        # walking up from the parent must never reach the child
        ancestor: str | None = ins.parent_id
        while ancestor is not None:
            if ancestor == ins.child_id:
                raise NodeReferenceError(ins.child_id, f"inserting under '{ins.parent_id}' creates a cycle")
            ancestor = self._parents.get(ancestor)

        self._parents[ins.child_id] = ins.parent_id
        index = ins.index if self.honor_insert_index else APPEND_INDEX
        return self.render_insert_child(ins, index)

    def _handle_mount_root(self, ins: MountRoot) -> Lines:
        self._require_declared(ins.root_id)
        if self._mounted_root is not None:
            raise ScopeStateError(f"test already mounted '{self._mounted_root}'; at most one mount_root per test")
        if ins.root_id in self._parents:
            raise NodeReferenceError(ins.root_id, f"node is a child of '{self._parents[ins.root_id]}' and cannot be mounted")
        self._mounted_root = ins.root_id
        return self.render_mount_root(ins)

    def _handle_assert_geometry(self, ins: AssertGeometry) -> Lines:
        self._require_declared(ins.node_id)
        return self.render_assert_geometry(ins)

    def _handle_annotate(self, ins: Annotate) -> Lines:
        return self.render_annotate(ins)
