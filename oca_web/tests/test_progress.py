import pytest

from oca_web.state.progress import analysis_message, analysis_progress, payment_message


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (0.0, 0),
        (-1.0, 0),
        (0.16, 1),
        (1.56, 10),
        (20.0, 99),
        (600.0, 99),
    ],
)
def test_analysis_progress_is_capped_below_100(elapsed, expected):
    assert analysis_progress(elapsed) == expected


@pytest.mark.parametrize(
    "pct, expected",
    [
        (0, "Connecting to AI..."),
        (14, "Connecting to AI..."),
        (15, "Parsing your document(s)..."),
        (40, "Analyzing spending patterns..."),
        (70, "Checking for anomalies..."),
        (99, "Compiling your report..."),
    ],
)
def test_analysis_message_thresholds(pct, expected):
    assert analysis_message(pct) == expected


def test_payment_message_changes_at_4_and_8_seconds():
    assert payment_message(0).startswith("Waiting")
    assert payment_message(3.9).startswith("Waiting")
    assert payment_message(4).startswith("This may take a moment")
    assert payment_message(8).startswith("Payment confirmed")
