"""Quiz-related constants shared across UI and core layers."""

COUNTDOWN_TICK_INTERVAL_MS: int = 1000
COUNTDOWN_WARNING_WINDOW_SECONDS: int = 60
SECONDS_PER_MINUTE: int = 60

# Score bands for the results view, checked from the top down.
SCORE_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "Excellent"),
    (80.0, "Good"),
    (70.0, "Fair"),
    (60.0, "Average"),
    (0.0, "Needs improvement"),
)
