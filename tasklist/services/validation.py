"""Form validation for task input."""

from typing import Any, List, Mapping, Union

from pydantic import BaseModel


class TaskValidationError(ValueError):
    """Raised when task input is missing required fields."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


def validate_task_input(data: Union[BaseModel, Mapping[str, Any]]) -> List[str]:
    """Check that title, description, date and time are filled in.

    Args:
        data: Candidate task fields, as a schema or a plain mapping

    Returns:
        One message per missing field, in the order title, description,
        date, time. An empty list means the input is valid.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()

    errors = []

    # title and description are trimmed; date and time come from pickers
    if not _text(data, "title").strip():
        errors.append("Title is required")
    if not _text(data, "description").strip():
        errors.append("Description is required")
    if not _text(data, "date"):
        errors.append("Date is required")
    if not _text(data, "time"):
        errors.append("Time is required")

    return errors


def _text(data: Mapping[str, Any], field: str) -> str:
    """Return a field's string value; anything that is not a string counts as empty."""
    value = data.get(field)
    return value if isinstance(value, str) else ""
