"""
Falkor CLI Main Entry Point

Standalone runner for falkor test files. Every public TestFunction or
TestCase found in the given files is run, one after another, with its own
Asserter.

Example:
    falkor-run --base-url http://localhost:8080 tests/api_tests.py
"""

import asyncio
import importlib.util
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, List, Optional, Tuple, Union

import click

from ..asserter import Asserter
from ..core.config import get_config, update_config
from ..core.logging import get_logger, setup_logging
from ..engine import TestCase, TestFunction

logger = get_logger(__name__)

Runnable = Union[TestFunction, TestCase]


@dataclass
class TestResult:
    """Outcome of one test in a runner invocation."""

    __test__ = False

    file: str
    name: str
    errors: List[AssertionError] = field(default_factory=list)
    logs: List[Tuple[Any, ...]] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def passed(self) -> bool:
        return not self.errors


def load_test_module(test_file: Path, index: int = 0) -> ModuleType:
    """
    Import a test file by path.

    Raises:
        click.ClickException: If the file cannot be imported
    """
    module_name = f"_falkor_tests_{index}_{test_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, test_file)
    if spec is None or spec.loader is None:
        raise click.ClickException(f"Unable to load test file: {test_file}")

    module = importlib.util.module_from_spec(spec)
    # Lets test files import their siblings.
    parent = str(test_file.parent.resolve())
    if parent not in sys.path:
        sys.path.insert(0, parent)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise click.ClickException(f"Unable to load test file {test_file}: {e}")
    return module


def discover_tests(test_files: List[Path]) -> List[Tuple[str, str, Runnable]]:
    """
    Collect the public test functions and test cases of each file, in
    definition order.
    """
    tests = []
    for index, test_file in enumerate(test_files):
        module = load_test_module(test_file, index)
        for name, value in vars(module).items():
            if name.startswith("_"):
                continue
            if isinstance(value, (TestFunction, TestCase)):
                tests.append((str(test_file), name, value))
    return tests


async def run_test(file: str, name: str, test: Runnable) -> TestResult:
    """Run one test with a fresh Asserter and collect its outcome."""
    asserter = Asserter()
    start = time.monotonic()

    if isinstance(test, TestFunction):
        await test(asserter)
    else:
        await test.set_asserter(asserter).run()

    return TestResult(
        file=file,
        name=name,
        errors=list(asserter.errors),
        logs=list(asserter.logs),
        duration_ms=int((time.monotonic() - start) * 1000),
    )


async def run_tests(tests: List[Tuple[str, str, Runnable]]) -> List[TestResult]:
    """Run the tests serially, reporting each as it finishes."""
    results = []
    for file, name, test in tests:
        result = await run_test(file, name, test)
        report_result(result)
        results.append(result)
    return results


def report_result(result: TestResult) -> None:
    if result.passed:
        click.echo(f"{click.style('SUCCESS', fg='green')} {result.file} {result.name}")
    else:
        click.echo(f"{click.style('FAILURE', fg='red')} {result.file} {result.name}")
        for error in result.errors:
            click.echo(str(error))

    if result.logs:
        click.echo("Log Lines:")
        for line in result.logs:
            click.echo(" ".join(str(part) for part in line))
        click.echo("---")


@click.command()
@click.version_option(version="0.1.0")
@click.argument(
    "test_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
@click.option("--base-url", default="", help="The base URL for sending requests")
@click.option(
    "--root-schema-path", default="", help="Directory JSON schema paths are relative to"
)
@click.option(
    "--timeout-secs",
    type=int,
    default=None,
    help="Timeout for the whole run, in seconds (default: 120)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write log output to this file",
)
def main(
    test_files: Tuple[str, ...],
    base_url: str,
    root_schema_path: str,
    timeout_secs: Optional[int],
    log_level: Optional[str],
    log_file: Optional[Path],
):
    """
    Run falkor test files.

    Example:
        falkor-run --base-url http://localhost:8080 tests/api_tests.py
    """
    setup_logging(log_level=log_level, log_file=log_file)

    if base_url:
        update_config(base_url=base_url)
    if root_schema_path:
        update_config(root_schema_path=root_schema_path)

    timeout = timeout_secs if timeout_secs is not None else get_config().runner_timeout

    tests = discover_tests([Path(f) for f in test_files])
    click.echo(f"{len(tests)} test cases discovered, in {len(test_files)} files.")
    logger.debug("Running %d tests with a %d second timeout", len(tests), timeout)

    start = time.monotonic()
    try:
        results = asyncio.run(asyncio.wait_for(run_tests(tests), timeout))
    except asyncio.TimeoutError:
        click.secho("Tests timed out, maybe done() was not called.", fg="red", err=True)
        sys.exit(1)

    elapsed = f" ({int((time.monotonic() - start) * 1000)}ms)"
    failures = [result for result in results if not result.passed]
    if failures:
        click.echo(click.style(f"FINISHED WITH {len(failures)} FAILURES", fg="red") + elapsed)
        sys.exit(1)

    click.echo(click.style("No errors, good job!", fg="green") + elapsed)


if __name__ == "__main__":
    main()
