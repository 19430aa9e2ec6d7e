import re
from importlib import metadata

from buildtrace import version


def test_version_matches_installed_distribution() -> None:
    assert re.fullmatch(r"\d+\.\d+\.\d+", version.__version__) is not None

    installed = version.get_version()
    try:
        expected = metadata.version("buildtrace")
    except metadata.PackageNotFoundError:
        expected = ""
    assert installed == expected
    if installed:
        assert installed == version.__version__
