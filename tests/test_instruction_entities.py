import pytest
from pydantic import ValidationError

from layout_gentest.layout_test.entities.fixture import FixtureProgram, TestCase
from layout_gentest.layout_test.entities.instruction import (APPEND_INDEX,
                                                             DEFAULT_TOLERANCE,
                                                             AssertGeometry,
                                                             Axis,
                                                             CreateNode,
                                                             DeclareTest,
                                                             DeclareTestSuite,
                                                             InsertChild,
                                                             MountRoot,
                                                             parse_instructions)
from layout_gentest.layout_test.errors import EmptyProgramError, ScopeStateError


def test_parse_instructions_dispatches_on_op():
    parsed = parse_instructions([
        {"op": "create_node", "node_id": "root"},
        {"op": "set_style", "node_id": "root", "property_name": "width", "property_value": "10px"},
        {"op": "insert_child", "parent_id": "root", "child_id": "root_child0", "index": 2},
        {"op": "mount_root", "root_id": "root"},
        {"op": "assert_geometry", "node_id": "root", "axis": "top", "expected_value": 4},
        {"op": "annotate", "label": "case"},
    ])
    assert [type(ins).__name__ for ins in parsed] == [
        "CreateNode", "SetStyle", "InsertChild", "MountRoot", "AssertGeometry", "Annotate",
    ]
    assert parsed[2].index == 2
    assert parsed[4].axis is Axis.TOP


def test_defaults():
    assert InsertChild(parent_id="a", child_id="b").index == APPEND_INDEX
    assert AssertGeometry(node_id="a", axis="width", expected_value=1).tolerance == DEFAULT_TOLERANCE
    mount = MountRoot(root_id="root")
    assert (mount.viewport_width, mount.viewport_height) == (400, 600)


def test_invalid_instructions_are_rejected():
    with pytest.raises(ValidationError):
        parse_instructions([{"op": "delete_node", "node_id": "root"}])
    with pytest.raises(ValidationError):
        parse_instructions([{"op": "assert_geometry", "node_id": "a", "axis": "depth", "expected_value": 1}])
    with pytest.raises(ValidationError):
        parse_instructions([{"op": "create_node", "node_id": "a", "extra": True}])
    with pytest.raises(ValidationError):
        AssertGeometry(node_id="a", axis="left", expected_value=1, tolerance=-1)


def test_instructions_are_immutable():
    node = CreateNode(node_id="root")
    with pytest.raises(ValidationError):
        node.node_id = "other"


def test_program_flattens_and_folds_back():
    program = FixtureProgram(
        suite_name="Suite",
        cases=[
            TestCase(name="one", instructions=[CreateNode(node_id="root")]),
            TestCase(name="two", instructions=[]),
        ],
    )
    flat = program.to_instructions()
    assert flat[0] == DeclareTestSuite(suite_name="Suite")
    assert flat[1] == DeclareTest(test_name="one")
    assert FixtureProgram.from_instructions(flat) == program


def test_from_instructions_rejects_malformed_streams():
    with pytest.raises(EmptyProgramError):
        FixtureProgram.from_instructions([])
    with pytest.raises(ScopeStateError):
        FixtureProgram.from_instructions([CreateNode(node_id="root")])
    with pytest.raises(ScopeStateError):
        FixtureProgram.from_instructions([DeclareTestSuite(suite_name="S"), CreateNode(node_id="root")])
    with pytest.raises(ScopeStateError):
        FixtureProgram.from_instructions([DeclareTestSuite(suite_name="S"), DeclareTestSuite(suite_name="T")])


@pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
def test_non_finite_numbers_are_rejected(value):
    with pytest.raises(ValidationError):
        parse_instructions([{"op": "assert_geometry", "node_id": "a", "axis": "left", "expected_value": value}])
    with pytest.raises(ValidationError):
        AssertGeometry(node_id="a", axis="left", expected_value=1, tolerance=float(value))
    with pytest.raises(ValidationError):
        MountRoot(root_id="root", viewport_width=float(value))
