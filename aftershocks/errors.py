class TimelineError(RuntimeError):
    """Base error for the aftershock timeline."""


class DataLoadError(TimelineError):
    """
    Raised when the source table cannot be fetched or parsed.
    The app shows the message to the viewer and stops.
    """


class EmptyDatasetError(TimelineError):
    """No event survived normalization; scales would be undefined."""


class MissingColumnError(TimelineError, KeyError):
    """A required column (time or magnitude) is not in the header row."""

    def __init__(self, column: str, available):
        self.column = column
        self.available = list(available)
        super().__init__(f"Missing column {column!r} (available: {', '.join(map(str, self.available))})")

    def __str__(self) -> str:
        return self.args[0]
