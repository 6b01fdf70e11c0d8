import structlog

from pivotflow.pivots.daily import calculate_daily_pivots
from pivotflow.utils import configure_default_logging, setup_logging

from conftest import flat_day


def test_default_setup_keeps_stdout_clean(restore_logging, capsys):
    structlog.reset_defaults()
    configure_default_logging()

    # A flat day goes through the tie-break, which logs at debug level.
    pivots = calculate_daily_pivots(flat_day("2024-01-01"))

    out, err = capsys.readouterr()
    assert len(pivots) == 1
    assert out == ""
    assert err == ""


def test_default_setup_keeps_host_configuration(restore_logging):
    structlog.reset_defaults()
    wrapper = structlog.make_filtering_bound_logger(10)
    structlog.configure(wrapper_class=wrapper)

    configure_default_logging()

    assert structlog.get_config()["wrapper_class"] is wrapper


def test_setup_logging_writes_to_stderr(restore_logging, capsys):
    setup_logging("DEBUG")

    calculate_daily_pivots(flat_day("2024-01-01"))

    out, err = capsys.readouterr()
    assert out == ""
    assert "daily_pivots_built" in err
