"""Prefect flow that turns every layout fixture into a generated GoogleTest header."""

from __future__ import annotations

from pathlib import Path

from prefect import flow, get_run_logger, task

from layout_gentest.layout_test.config import GentestConfig, get_config
from layout_gentest.layout_test.entities.fixture import Fixture, FixtureResult
from layout_gentest.layout_test.extraction.browser import BrowserSession
from layout_gentest.layout_test.pipeline import aggregate, generate_fixture
from layout_gentest.layout_test.repository.fixture_repository import FixtureRepository


@task
def find_fixtures(feature_dir: Path, pattern: str) -> list[Fixture]:
    """Find all fixture HTML files to generate tests for.

    Args:
        feature_dir: Directory containing fixture files
        pattern: Glob pattern for fixture files

    Returns:
        Fixtures sorted by name
    """
    return FixtureRepository.find_fixtures(feature_dir, pattern)


@task
def generate_all(fixtures: list[Fixture], config: GentestConfig) -> list[FixtureResult]:
    """Extract and render fixtures one at a time inside a single browser session."""
    logger = get_run_logger()
    results = []
    with BrowserSession(config.browser) as session:
        for fixture in fixtures:
            result = generate_fixture(fixture, session, config)
            if result.ok:
                logger.info(f"{fixture.name}: wrote {result.output_path}")
            else:
                logger.error(f"{fixture.name}: {result.error}")
            results.append(result)
    return results


@task
def write_entry_point(results: list[FixtureResult], config: GentestConfig) -> Path | None:
    """Aggregate the generated headers into the single entry point."""
    return aggregate(results, config)


@flow(validate_parameters=False)
def layout_gentest_flow(config: GentestConfig | None = None) -> list[FixtureResult]:
    """1) find fixtures in the feature directory
    2) open one browser session for the batch
    3) per fixture, sequentially:
       a) wrap it in the page template
       b) load it and capture the logged IR payload
       c) render it with a fresh emitter
       d) write <fixture>.<ext>, or nothing if it failed
    4) close the session and write the entry point
    """
    logger = get_run_logger()
    config = config or get_config()

    fixtures = find_fixtures(config.paths.feature_dir, config.paths.fixture_glob)
    logger.info(f"Processing {len(fixtures)} fixture(s) with backend '{config.emitter.backend}'")

    results = generate_all(fixtures, config)

    entry_point = write_entry_point(results, config)

    failed = [r.name for r in results if r.failed]
    logger.info(f"Done: {len(results) - len(failed)} ok, {len(failed)} failed; entry point {entry_point}")
    if failed:
        logger.warning(f"Failed fixtures: {', '.join(failed)}")
    return results


if __name__ == "__main__":
    layout_gentest_flow(get_config())
