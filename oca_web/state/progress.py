from __future__ import annotations

PAYMENT_MESSAGES: tuple[tuple[float, str], ...] = (
    (0.0, "Waiting for payment confirmation..."),
    (4.0, "This may take a moment. Please complete the payment in the new tab."),
    (8.0, "Payment confirmed! Preparing your analysis environment..."),
)

ANALYSIS_MESSAGES: tuple[tuple[int, str], ...] = (
    (0, "Connecting to AI..."),
    (15, "Parsing your document(s)..."),
    (40, "Analyzing spending patterns..."),
    (65, "Checking for anomalies..."),
    (85, "Compiling your report..."),
)

PROGRESS_STEP_SECONDS = 0.15
PROGRESS_CAP = 99


def payment_message(elapsed_seconds: float) -> str:
    current = PAYMENT_MESSAGES[0][1]
    for starts_at, message in PAYMENT_MESSAGES:
        if elapsed_seconds >= starts_at:
            current = message
    return current


def analysis_progress(elapsed_seconds: float) -> int:
    # 1% per step, held below 100 until the report actually arrives
    if elapsed_seconds <= 0:
        return 0
    return min(int(elapsed_seconds / PROGRESS_STEP_SECONDS), PROGRESS_CAP)


def analysis_message(progress: int) -> str:
    current = ANALYSIS_MESSAGES[0][1]
    for threshold, message in ANALYSIS_MESSAGES:
        if progress >= threshold:
            current = message
    return current
