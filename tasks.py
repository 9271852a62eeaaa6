# type: ignore
from invoke import task

PACKAGE = "lansearch"


@task
def venv(ctx):
    """Create the development environment with uv."""
    ctx.run("uv sync --extra dev")


@task
def clean(ctx):
    """
    Remove build artifacts and caches.
    """
    ctx.run("rm -rf dist build .pytest_cache .mypy_cache .ruff_cache .coverage")
    ctx.run("find . -name __pycache__ -type d -prune -exec rm -rf {} +")


@task
def format(ctx):
    """Apply ruff formatting and import sorting."""
    ctx.run("ruff check --select I --fix src tests", pty=True)
    ctx.run("ruff format src tests", pty=True)


@task
def lint(ctx):
    """
    Perform static analysis on the source code to check for syntax errors and enforce style consistency.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run(f"mypy src/{PACKAGE}", pty=True)


@task(help={"k": "Only run tests matching this expression"})
def test(ctx, k=None):
    """
    Run tests with coverage information.
    """
    selector = f" -k '{k}'" if k else ""
    ctx.run(f"pytest --cov={PACKAGE} --cov-report=term-missing{selector}", pty=True)


@task(pre=[lint, test])
def ci(ctx):
    """Lint and test, as run in CI."""


@task
def build_package(ctx):
    """
    Build package using uv.
    """

    ctx.run("rm -rf dist")
    ctx.run("uv build")
