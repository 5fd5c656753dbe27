"""
Shared pytest fixtures and configuration for road_earthwork tests.
"""

import pytest

FULL_HEADER = "Chainage,Proposed_FRL,EGL_15m_L,EGL_Med_L,EGL_Med_R,EGL_15m_R"


def pytest_configure(config):
    """Register custom markers."""
    try:
        import matplotlib
        matplotlib.use("Agg")
    except ImportError:
        pass

    config.addinivalue_line(
        "markers", "requires_matplotlib: requires matplotlib to be installed"
    )
    config.addinivalue_line(
        "markers", "requires_ezdxf: requires ezdxf for DXF export tests"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip tests based on missing dependencies."""
    try:
        import matplotlib
        matplotlib_available = True
    except ImportError:
        matplotlib_available = False

    try:
        import ezdxf
        ezdxf_available = True
    except ImportError:
        ezdxf_available = False

    for item in items:
        if "requires_matplotlib" in item.keywords and not matplotlib_available:
            item.add_marker(pytest.mark.skip(reason="matplotlib not installed"))
        if "requires_ezdxf" in item.keywords and not ezdxf_available:
            item.add_marker(pytest.mark.skip(reason="ezdxf not installed"))


@pytest.fixture
def sample_text():
    """Five-station sample table (0+000 to 0+080)."""
    from road_earthwork.io.station_table import generate_sample_table

    return generate_sample_table()


@pytest.fixture
def sample_file(tmp_path, sample_text):
    """Sample table written to a CSV file."""
    path = tmp_path / "stations.csv"
    path.write_text(sample_text, encoding="utf-8")
    return path


@pytest.fixture
def default_parameters():
    """Default road template (B=20, median 4, camber 2.5%, 1:1 cut, 1:2 fill)."""
    from road_earthwork.core.parameters import SectionParameters

    return SectionParameters()


@pytest.fixture
def flat_parameters():
    """Default template without camber, so edges sit at crown level."""
    from road_earthwork.core.parameters import SectionParameters

    return SectionParameters(camber=0.0)


@pytest.fixture
def fill_text():
    """Two stations 20 m apart, crown 100 over flat ground at 95."""
    return "\n".join([
        FULL_HEADER,
        "0+000,100,95,95,95,95",
        "0+020,100,95,95,95,95",
    ])


@pytest.fixture
def fill_result(fill_text, flat_parameters):
    """Computed result of the two-station fill run."""
    from road_earthwork.core.volume import compute_earthwork

    return compute_earthwork(fill_text, flat_parameters)


@pytest.fixture
def tmp_output_dir(tmp_path):
    """Temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
