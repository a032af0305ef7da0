class BookingError(RuntimeError):
    """Base class for conditions that stop a booking cycle."""
    pass


class MissingSelection(BookingError):
    """Raised when a phase or the manual trigger runs without a selected slot."""

    def __init__(self, message: str = "No slot selected") -> None:
        super().__init__(message)


class MissingSubOption(BookingError):
    """Raised when the selected slot has no field chosen for its category."""

    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f"No {category} field selected")


class TargetNotOpenable(BookingError):
    """Raised by the executor when the slot's reserve control cannot be located."""
    pass


class OptionNotMatched(BookingError):
    """Raised when no option in the field dropdown matches the chosen sub-option."""
    pass


class ConfirmNotAvailable(BookingError):
    """Raised by the executor when the confirm control cannot be located."""
    pass


class UnknownItem(LookupError):
    """Raised when selecting a slot reference the item source did not list."""
    pass


class InvalidSubOption(ValueError):
    """Raised when a field number is not offered for the given category."""
    pass
