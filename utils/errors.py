class BudgetError(Exception):
    """Base class for errors raised by the budget services."""


class ValidationError(BudgetError, ValueError):
    """Input rejected by a service before it reaches the database."""


class InvalidDateError(ValidationError):
    """A date value could not be parsed as YYYY-MM-DD."""

    def __init__(self, value, field: str = "date"):
        self.value = value
        self.field = field
        super().__init__(f"Invalid {field}: {value!r}. Use YYYY-MM-DD.")
