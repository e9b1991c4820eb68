import json

from layout_gentest.layout_test.entities.fixture import Fixture, FixtureProgram
from layout_gentest.layout_test.pipeline import generate_fixture, render_program, run_batch


class FakeConsole:
    """Stands in for the browser: returns canned console messages per page name."""

    def __init__(self, messages_by_name):
        self.messages_by_name = messages_by_name
        self.loaded = []

    def extract(self, page_path):
        self.loaded.append(page_path)
        return self.messages_by_name[page_path.stem]


def _payload(cases):
    return [json.dumps({"gentest": {"cases": cases}})]


GOOD_CASE = {
    "name": "flex_direction_row",
    "instructions": [
        {"op": "create_node", "node_id": "root"},
        {"op": "set_style", "node_id": "root", "property_name": "width", "property_value": "100px"},
        {"op": "mount_root", "root_id": "root", "viewport_width": 400, "viewport_height": 600},
        {"op": "annotate", "label": "flex_direction_row"},
        {"op": "assert_geometry", "node_id": "root", "axis": "width", "expected_value": 100},
    ],
}

BAD_CASE = {
    "name": "dangling",
    "instructions": [{"op": "assert_geometry", "node_id": "ghost", "axis": "left", "expected_value": 0}],
}


def _fixture(config, name):
    path = config.paths.feature_dir / f"{name}.html"
    path.write_text(f'<div id="{name}"></div>', encoding="utf-8")
    return Fixture(name=name, path=path, html=path.read_text(encoding="utf-8"))


def test_render_program_uses_suite_name():
    text = render_program(FixtureProgram(suite_name="flex_direction"))
    assert "class flex_direction : public testing::Test {" in text


def test_generate_fixture_writes_output(gentest_config):
    fixture = _fixture(gentest_config, "flex_direction")
    console = FakeConsole({"flex_direction": _payload([GOOD_CASE])})

    result = generate_fixture(fixture, console, gentest_config)

    assert result.ok
    assert result.output_path == gentest_config.paths.output_dir / "flex_direction.hpp"
    text = result.output_path.read_text(encoding="utf-8")
    assert "TEST_F(flex_direction, flex_direction_row) {" in text
    assert "// test case id flex_direction_row" in text
    assert console.loaded == [gentest_config.paths.destination_dir / "flex_direction.html"]


def test_undeclared_node_leaves_no_output_file(gentest_config):
    fixture = _fixture(gentest_config, "dangling")
    stale = gentest_config.paths.output_dir / "dangling.hpp"
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")

    result = generate_fixture(fixture, FakeConsole({"dangling": _payload([BAD_CASE])}), gentest_config)

    assert result.failed
    assert result.error.startswith("NodeReferenceError")
    assert not stale.exists()


def test_missing_payload_is_an_extraction_failure(gentest_config):
    fixture = _fixture(gentest_config, "silent")
    result = generate_fixture(fixture, FakeConsole({"silent": []}), gentest_config)
    assert result.failed
    assert result.error.startswith("ExtractionError")
    assert not (gentest_config.paths.output_dir / "silent.hpp").exists()


def test_run_batch_isolates_failures_and_aggregates_successes(gentest_config):
    for name in ("a_good", "b_bad", "c_empty"):
        _fixture(gentest_config, name)
    console = FakeConsole({
        "a_good": _payload([GOOD_CASE]),
        "b_bad": _payload([BAD_CASE]),
        "c_empty": _payload([]),
    })

    results = run_batch(gentest_config, console)

    assert [(r.name, r.ok) for r in results] == [("a_good", True), ("b_bad", False), ("c_empty", True)]
    outputs = sorted(p.name for p in gentest_config.paths.output_dir.iterdir())
    assert outputs == ["a_good.hpp", "c_empty.hpp"]

    main = gentest_config.paths.main_output.read_text(encoding="utf-8")
    assert "#include<a_good.hpp>\n#include<c_empty.hpp>\n" in main
    assert "b_bad" not in main
