import pytest

from layout_gentest.layout_test.config import (BrowserConfig, EmitterConfig,
                                               GentestConfig, PathsConfig)
from layout_gentest.layout_test.entities.instruction import (AssertGeometry,
                                                             Axis,
                                                             CreateNode,
                                                             DeclareTest,
                                                             DeclareTestSuite,
                                                             InsertChild,
                                                             MountRoot,
                                                             SetStyle)


@pytest.fixture
def foo_bar_program():
    return [
        DeclareTestSuite(suite_name="Foo"),
        DeclareTest(test_name="Bar"),
        CreateNode(node_id="root"),
        SetStyle(node_id="root", property_name="width", property_value="100px"),
        MountRoot(root_id="root", viewport_width=400, viewport_height=600),
        AssertGeometry(node_id="root", axis=Axis.WIDTH, expected_value=100, tolerance=1),
    ]


@pytest.fixture
def two_level_body():
    return [
        CreateNode(node_id="root"),
        SetStyle(node_id="root", property_name="width", property_value="100px"),
        CreateNode(node_id="root_child0"),
        SetStyle(node_id="root_child0", property_name="height", property_value="10px"),
        InsertChild(parent_id="root", child_id="root_child0", index=0),
        MountRoot(root_id="root"),
        AssertGeometry(node_id="root", axis=Axis.WIDTH, expected_value=100),
        AssertGeometry(node_id="root_child0", axis=Axis.HEIGHT, expected_value=10),
    ]


@pytest.fixture
def gentest_config(tmp_path):
    feature_dir = tmp_path / "feature"
    feature_dir.mkdir()
    main_template = tmp_path / "main.template"
    main_template.write_text('#include "gtest/gtest.h"\n\n%s\nint main() { return 0; }\n', encoding="utf-8")
    return GentestConfig(
        browser=BrowserConfig(),
        paths=PathsConfig(
            feature_dir=feature_dir,
            destination_dir=tmp_path / "destination",
            output_dir=tmp_path / "cxx",
            main_template=main_template,
            main_output=tmp_path / "src" / "main.cpp",
        ),
        emitter=EmitterConfig(),
    )
