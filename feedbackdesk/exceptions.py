class FeedbackDeskError(Exception):
    """Base class for errors raised by feedbackdesk."""


class NoEvaluationsError(FeedbackDeskError):
    """A report was requested for a session that has no feedback yet."""

    def __init__(self, message: str = "Data deficit: No evaluations found for this session."):
        super().__init__(message)


class AnalysisInterruptedError(FeedbackDeskError):
    """The generative service failed or returned something unusable."""

    def __init__(self, message: str = "Analysis Engine Interrupted. Please check connectivity."):
        super().__init__(message)
