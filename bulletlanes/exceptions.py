"""
Custom exception hierarchy for bulletlanes.

Placement rejection is not an error: a submission that finds no room
returns None and is queued. Only misuse and misconfiguration raise.
"""


class BulletLanesError(Exception):
    """Base exception for all bulletlanes errors."""

    def __init__(self, message: str, context: dict = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(BulletLanesError):
    """Raised for a missing/invalid render target or invalid options."""

    def __init__(self, message: str, target: str = None, field: str = None, context: dict = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            target: Optional description of the render target that failed
            field: Optional option name that caused the error
            context: Optional context dictionary
        """
        if target or field:
            context = context or {}
            if target:
                context['target'] = target
            if field:
                context['field'] = field
        super().__init__(message, context)
        self.target = target
        self.field = field


class UninitializedStateError(BulletLanesError):
    """Raised when an internal operation runs before its setup completed."""

    def __init__(self, message: str, component: str = None, context: dict = None):
        if component:
            context = context or {}
            context['component'] = component
        super().__init__(message, context)
        self.component = component


class UnknownItemError(BulletLanesError):
    """Raised when an operation names an item that is not active."""

    def __init__(self, message: str, item_id: str = None, context: dict = None):
        if item_id:
            context = context or {}
            context['item_id'] = item_id
        super().__init__(message, context)
        self.item_id = item_id
