from pathlib import Path

import yaml
from jinja2 import Environment, StrictUndefined, Template

from layout_gentest.layout_test.emitter.base import Emitter, Lines
from layout_gentest.layout_test.emitter.helpers.formatting import (cxx_string_literal,
                                                                   format_number)
from layout_gentest.layout_test.entities.instruction import (Annotate,
                                                             AssertGeometry,
                                                             CreateNode,
                                                             InsertChild,
                                                             MountRoot,
                                                             SetStyle)

# Load once at module import
with open(Path(__file__).parent / "templates" / "cxx.yml", encoding="utf-8") as f:
    _cfg = yaml.safe_load(f)

_env = Environment(undefined=StrictUndefined, autoescape=False)
_env.filters["cxx_string"] = cxx_string_literal
_env.filters["number"] = format_number

# Each template id maps to one compiled Template per output line
TEMPLATES: dict[str, list[Template]] = {
    tpl_id: [_env.from_string(line) for line in lines]
    for tpl_id, lines in _cfg["templates"].items()
}
ACCESSORS: dict[str, str] = _cfg["accessors"]


def render_template(tpl_id: str, **ctx) -> list[str]:
    return [tpl.render(**ctx) for tpl in TEMPLATES[tpl_id]]


class CxxEmitter(Emitter):
    """GoogleTest backend: one TEST_F fixture class per suite, one TEST_F per case."""

    name = "cxx"
    extension = _cfg["extension"]

    def __init__(self, suite_name: str | None = None, honor_insert_index: bool = False):
        super().__init__(
            suite_name=suite_name,
            indent_unit=_cfg["indent"],
            placeholder=_cfg["placeholder"],
            honor_insert_index=honor_insert_index,
        )

    def prologue_lines(self) -> Lines:
        return render_template("prologue")

    def epilogue_lines(self) -> Lines:
        return render_template("epilogue")

    def test_prologue_lines(self, test_name: str) -> Lines:
        return render_template("test_prologue", test_name=test_name)

    def test_epilogue_lines(self) -> Lines:
        return render_template("test_epilogue")

    def render_create_node(self, ins: CreateNode) -> Lines:
        return render_template("create_node", node_id=ins.node_id)

    def render_set_style(self, ins: SetStyle) -> Lines:
        return render_template(
            "set_style",
            node_id=ins.node_id,
            property_name=ins.property_name,
            property_value=ins.property_value,
        )

    def render_insert_child(self, ins: InsertChild, index: int) -> Lines:
        return render_template("insert_child", parent_id=ins.parent_id, child_id=ins.child_id, index=index)

    def render_mount_root(self, ins: MountRoot) -> Lines:
        return render_template(
            "mount_root",
            root_id=ins.root_id,
            viewport_width=ins.viewport_width,
            viewport_height=ins.viewport_height,
        )

    def render_assert_geometry(self, ins: AssertGeometry) -> Lines:
        return render_template(
            "assert_geometry",
            node_id=ins.node_id,
            accessor=ACCESSORS[ins.axis.value],
            expected_value=ins.expected_value,
            tolerance=ins.tolerance,
        )

    def render_annotate(self, ins: Annotate) -> Lines:
        # an empty label has nothing to trace back to
        if not ins.label:
            return []
        return render_template("annotate", label=ins.label)
