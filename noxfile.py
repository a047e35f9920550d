import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# Packages with C extensions that must be rebuilt per Python version.
# Poetry's wheel cache can serve a .so compiled for the wrong interpreter.
_C_EXT_PACKAGES = ["psycopg2-binary"]


def _install(session: nox.Session) -> None:
    """Install the project with the test and database extras into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--all-extras",
        external=True,
    )
    # Force-rebuild C-extension packages so the .so matches this Python version.
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no infrastructure required)."""
    _install(session)
    session.run(
        "pytest",
        "tests/ordering/domain/",
        "tests/inventory/domain/",
        "tests/payments/domain/",
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def loadtest(session: nox.Session) -> None:
    """Run a short headless checkout load test against a running server."""
    _install(session)
    session.run(
        "locust",
        "-f",
        "loadtests/locustfile.py",
        "--headless",
        "--users",
        "20",
        "--spawn-rate",
        "5",
        "--run-time",
        "1m",
        "--host",
        session.posargs[0] if session.posargs else "http://localhost:8000",
    )
