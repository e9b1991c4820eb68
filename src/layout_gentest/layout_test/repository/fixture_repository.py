"""
Fixture Repository for reading layout fixtures and writing generated tests.

This repository handles:
- Discovering fixture HTML files in the feature directory
- Wrapping a fixture in the page template so a browser can run it
- Writing one generated test file per fixture, atomically
- Aggregating the generated files into a single entry-point compilation unit
"""

import logging
import os
import tempfile
from pathlib import Path

from jinja2 import Template

from layout_gentest.layout_test.entities.fixture import Fixture
from layout_gentest.layout_test.entities.instruction import (DEFAULT_VIEWPORT_HEIGHT,
                                                             DEFAULT_VIEWPORT_WIDTH)
from layout_gentest.layout_test.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Single substitution point in main.template
INCLUDE_LIST_MARKER = "%s"


class FixtureRepository:
    """Repository for fixture inputs and generated test outputs."""

    @staticmethod
    def find_fixtures(feature_dir: Path, pattern: str = "*.html") -> list[Fixture]:
        """
        Find fixture files and load them, sorted by name.

        Args:
            feature_dir: Directory containing fixture HTML files
            pattern: Glob pattern for fixture files

        Returns:
            List of Fixture entities; the name is the file stem
        """
        feature_dir = Path(feature_dir)
        if not feature_dir.exists():
            logger.warning("Feature directory does not exist: %s", feature_dir)
            return []

        fixtures = [
            Fixture(name=path.stem, path=path, html=path.read_text(encoding="utf-8"))
            for path in sorted(feature_dir.glob(pattern))
            if path.is_file()
        ]
        logger.info("Found %d fixture(s) in %s", len(fixtures), feature_dir)
        return fixtures

    @staticmethod
    def wrap_fixture(
        fixture: Fixture,
        template_path: Path,
        destination_dir: Path,
        viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
        viewport_height: float = DEFAULT_VIEWPORT_HEIGHT,
    ) -> Path:
        """Render the fixture into the page template and write <destination>/<name>.html."""
        template = Template(Path(template_path).read_text(encoding="utf-8"))
        page = template.render(
            fixture_name=fixture.name,
            fixture_html=fixture.html,
            viewport_width=viewport_width,
            viewport_height=viewport_height,
        )
        destination_dir = Path(destination_dir)
        destination_dir.mkdir(parents=True, exist_ok=True)
        page_path = destination_dir / f"{fixture.name}.html"
        page_path.write_text(page, encoding="utf-8")
        return page_path

    @staticmethod
    def output_path(output_dir: Path, name: str, extension: str) -> Path:
        return Path(output_dir) / f"{name}.{extension}"

    @staticmethod
    def write_output(output_dir: Path, name: str, extension: str, text: str) -> Path:
        """
        Write a generated file atomically.

        The text goes to a temporary file in the same directory which then
        replaces the target, so a reader never sees a truncated file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        target = FixtureRepository.output_path(output_dir, name, extension)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=output_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("Wrote %s", target)
        return target

    @staticmethod
    def remove_output(output_dir: Path, name: str, extension: str) -> None:
        """Delete a stale output so a failed fixture leaves no file behind."""
        target = FixtureRepository.output_path(output_dir, name, extension)
        if target.exists():
            target.unlink()
            logger.info("Removed stale output %s", target)

    @staticmethod
    def render_include_list(names: list[str], extension: str) -> str:
        return "".join(f"#include<{name}.{extension}>\n" for name in names)

    @staticmethod
    def write_entry_point(names: list[str], extension: str, template_path: Path, output_path: Path) -> Path:
        """
        Aggregate generated files into one entry point.

        Args:
            names: Fixture names that produced output, in include order
            extension: Extension of the generated files
            template_path: Template with a single "%s" substitution point
            output_path: Where to write the entry point

        Returns:
            The output path
        """
        template = Path(template_path).read_text(encoding="utf-8")
        if template.count(INCLUDE_LIST_MARKER) != 1:
            raise ConfigurationError(
                f"{template_path} must contain exactly one '{INCLUDE_LIST_MARKER}' substitution point"
            )

        content = template.replace(INCLUDE_LIST_MARKER, FixtureRepository.render_include_list(names, extension))
        output_path = Path(output_path)
        return FixtureRepository.write_output(output_path.parent, output_path.stem, output_path.suffix.lstrip("."), content)
