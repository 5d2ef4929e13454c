from uuid import UUID


class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: UUID):
        self.session_id = session_id
        super().__init__(
            "session",
            f"Session with ID {session_id} not found",
            {"session_id": str(session_id)},
        )


class ExerciseNotFoundError(NotFoundError):
    def __init__(self, exercise_id: UUID):
        self.exercise_id = exercise_id
        super().__init__(
            "exercise",
            f"Exercise with ID {exercise_id} not found in session",
            {"exercise_id": str(exercise_id)},
        )


class SetNotFoundError(NotFoundError):
    def __init__(self, set_id: UUID):
        self.set_id = set_id
        super().__init__(
            "set",
            f"Set with ID {set_id} not found in session",
            {"set_id": str(set_id)},
        )


class WorkoutNotFoundError(NotFoundError):
    def __init__(self, workout_id: UUID):
        self.workout_id = workout_id
        super().__init__(
            "workout",
            f"Workout with ID {workout_id} not found",
            {"workout_id": str(workout_id)},
        )


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class InvalidOperationError(BusinessRuleError):
    """Raised when a lifecycle transition is not legal from the current state."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="BR_INVALID_OPERATION", details=details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class ActiveSessionExistsError(ConflictError):
    def __init__(self, session_id: UUID):
        self.session_id = session_id
        super().__init__(
            f"Cannot start a new session. Another session ({session_id}) is already active. "
            "Please complete or pause the active session first.",
            code="CF_ACTIVE_SESSION_EXISTS",
            details={"session_id": str(session_id)},
        )


class MultipleActiveSessionsError(ConflictError):
    """Integrity violation: the store holds more than one active session."""

    def __init__(self, session_ids: list[UUID]):
        self.session_ids = session_ids
        super().__init__(
            "Multiple active sessions found. Only one session can be active at a time.",
            code="CF_MULTIPLE_ACTIVE_SESSIONS",
            details={"session_ids": [str(sid) for sid in session_ids]},
        )


class PersistenceError(DomainError):
    """Wraps a failure of the underlying store."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(
            f"DB_{operation.upper()}_FAILED",
            f"Failed to {operation} session: {cause}",
            {"operation": operation, "cause": type(cause).__name__},
        )
