# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create a virtual environment with wattscout and its test and dev extras."""
    ctx.run("uv venv")
    ctx.run('uv pip install -e ".[test,dev]"')


@task
def clean(ctx):
    """
    Remove all files and directories that are not under version control to ensure a pristine working environment.
    Use caution as this operation cannot be undone and might remove untracked files.

    """

    ctx.run("git clean -nfdx")

    response = (
        input("Are you sure you want to remove all untracked files? (y/n) [n]: ")
        .strip()
        .lower()
    )
    if response == "y":
        ctx.run("git clean -fdx")


@task
def lint(ctx):
    """
    Perform static analysis on the source code to check for syntax errors and enforce style consistency.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=wattscout --cov-report=term-missing", pty=True)


@task
def build_package(ctx):
    """
    Build package using uv.
    """

    ctx.run("rm -rf dist")
    ctx.run("uv build")


@task
def mock(ctx, port=8081):
    """Run a mock power meter on localhost for manual testing."""
    ctx.run(f"wattscout mock --host 127.0.0.1 --port {port}", pty=True)
