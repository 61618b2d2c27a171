"""
Exception classes for the UI filter compiler.
"""


class UIFilterError(Exception):
    """Base exception for all UI filter errors."""
    pass


class InvalidFilterError(UIFilterError):
    """Raised when a filter request is malformed."""
    pass


class FieldResolutionError(UIFilterError):
    """Raised when a filter or sort references a field that cannot be resolved."""
    def __init__(self, field: str):
        super().__init__(f"Unable to resolve field: {field}")
        self.field = field


class UnsupportedMatchModeError(UIFilterError):
    """Raised when a match mode does not apply to a field's value category."""
    def __init__(self, field: str, match_mode, category):
        super().__init__(
            f"Match mode {match_mode.value} is not supported for "
            f"{category.value} field {field}"
        )
        self.field = field
        self.match_mode = match_mode
        self.category = category


class ValueShapeError(UIFilterError):
    """Raised when a criterion value does not have the shape its match mode needs."""
    def __init__(self, field: str, match_mode, message: str):
        super().__init__(f"Invalid value for {field} ({match_mode.value}): {message}")
        self.field = field
        self.match_mode = match_mode


class UnsupportedOperatorError(UIFilterError):
    """Raised when a backend cannot lower a predicate operator."""
    def __init__(self, operator, backend: str):
        super().__init__(f"Operator {operator.value} is not supported by {backend}")
        self.operator = operator
        self.backend = backend
