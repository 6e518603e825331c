class StepTransitionError(Exception):
    """Raised when an onboarding action is not allowed in the current step."""
