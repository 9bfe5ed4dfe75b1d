"""Error taxonomy for parsing, validation and submission."""


class JtwError(Exception):
    """Base class for every error the CLI knows how to render."""


class MalformedResponse(JtwError):
    """The AI output holds no decodable JSON array of entries."""


class EntryValidationError(MalformedResponse):
    field = ""


class InvalidActivity(EntryValidationError):
    field = "activity"


class InvalidTask(EntryValidationError):
    field = "task"


class InvalidHours(EntryValidationError):
    field = "hours"


class InvalidDate(EntryValidationError):
    field = "date"


class EmptyExtraction(JtwError):
    """The AI answered with a well-formed but empty array."""


class TaskNotFound(JtwError):
    def __init__(self, keys: list[str]):
        self.keys = list(keys)
        super().__init__(f"Tasks not found: {', '.join(self.keys)}")


class SubmissionFailure(JtwError):
    """A single worklog could not be written."""


class TransportFailure(JtwError):
    """Network, auth or quota problem talking to the AI service or Jira."""

    def __init__(self, message: str, hint: str = ""):
        super().__init__(message)
        self.hint = hint


class ConfigMissing(JtwError):
    def __init__(self, message: str = "Configuration not found"):
        super().__init__(message)


class HumanCancellation(JtwError):
    """The user backed out of an interactive step."""
