"""Fixture -> browser -> IR -> emitter -> file pipeline.

Each fixture is processed independently: it gets its own emitter, and a
``GentestError`` while extracting or rendering it is recorded in its
``FixtureResult`` without touching the other fixtures. A failed fixture never
leaves an output file behind.
"""

import logging
from pathlib import Path
from typing import Protocol

from layout_gentest.layout_test.config import GentestConfig
from layout_gentest.layout_test.emitter.registry import create_emitter, get_emitter_class
from layout_gentest.layout_test.entities.fixture import Fixture, FixtureProgram, FixtureResult
from layout_gentest.layout_test.errors import GentestError
from layout_gentest.layout_test.extraction.decoder import decode_payload
from layout_gentest.layout_test.repository.fixture_repository import FixtureRepository

logger = logging.getLogger(__name__)


class ConsoleSource(Protocol):
    """Anything that can load a page and return its console log texts."""

    def extract(self, page_path: Path) -> list[str]: ...


def render_program(program: FixtureProgram, backend: str = "cxx", honor_insert_index: bool = False) -> str:
    """Render one fixture program with a fresh emitter."""
    emitter = create_emitter(backend, suite_name=program.suite_name, honor_insert_index=honor_insert_index)
    return emitter.emit_fixture(program)


def extract_program(fixture: Fixture, source: ConsoleSource, config: GentestConfig) -> FixtureProgram:
    """Wrap the fixture, run it in the browser and decode the logged payload."""
    page_path = FixtureRepository.wrap_fixture(fixture, config.paths.page_template, config.paths.destination_dir)
    messages = source.extract(page_path)
    return decode_payload(messages, fixture.name)


def generate_fixture(fixture: Fixture, source: ConsoleSource, config: GentestConfig) -> FixtureResult:
    """Extract, render and write one fixture; failures are captured, not raised."""
    extension = get_emitter_class(config.emitter.backend).extension
    try:
        program = extract_program(fixture, source, config)
        text = render_program(program, config.emitter.backend, config.emitter.honor_insert_index)
    except GentestError as e:
        logger.error("Fixture %s failed: %s", fixture.name, e)
        FixtureRepository.remove_output(config.paths.output_dir, fixture.name, extension)
        return FixtureResult(name=fixture.name, ok=False, error=f"{type(e).__name__}: {e}")

    output_path = FixtureRepository.write_output(config.paths.output_dir, fixture.name, extension, text)
    return FixtureResult(name=fixture.name, ok=True, output_path=output_path)


def aggregate(results: list[FixtureResult], config: GentestConfig) -> Path | None:
    """Write the entry point including every fixture that succeeded."""
    template_path = Path(config.paths.main_template)
    if not template_path.exists():
        logger.warning("Entry point template %s not found; skipping aggregation", template_path)
        return None

    extension = get_emitter_class(config.emitter.backend).extension
    names = [r.name for r in results if r.ok]
    return FixtureRepository.write_entry_point(names, extension, template_path, config.paths.main_output)


def run_batch(config: GentestConfig, source: ConsoleSource, fixtures: list[Fixture] | None = None) -> list[FixtureResult]:
    """Generate every fixture sequentially using one console source, then aggregate."""
    if fixtures is None:
        fixtures = FixtureRepository.find_fixtures(config.paths.feature_dir, config.paths.fixture_glob)

    results = [generate_fixture(fixture, source, config) for fixture in fixtures]
    aggregate(results, config)

    failed = [r for r in results if r.failed]
    logger.info("Generated %d of %d fixture(s)", len(results) - len(failed), len(results))
    return results
