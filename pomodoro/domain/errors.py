"""Business logic errors raised by the interval engine and repositories"""


class PomodoroError(Exception):
    """Base class for all interval engine errors"""


class NoIntervalsError(PomodoroError):
    """No interval has been recorded yet"""

    def __init__(self, message: str = "No intervals"):
        super().__init__(message)


class IntervalNotRunningError(PomodoroError):
    def __init__(self, message: str = "Interval not running"):
        super().__init__(message)


class IntervalCompletedError(PomodoroError):
    """Operation attempted on a Done or Cancelled interval"""

    def __init__(self, message: str = "Interval is completed or cancelled"):
        super().__init__(message)


class InvalidStateError(PomodoroError):
    def __init__(self, message: str = "Invalid state"):
        super().__init__(message)


class InvalidIDError(PomodoroError):
    """No interval is stored under the given identifier"""

    def __init__(self, interval_id=None):
        message = "Invalid ID" if interval_id is None else f"Invalid ID: {interval_id}"
        super().__init__(message)
        self.interval_id = interval_id
