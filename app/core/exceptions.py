# app/core/exceptions.py

from typing import List, Optional


class SchemaStructureError(ValueError):
    """Imported schema is missing pages, ids, titles, types or labels."""


class SchemaNotPublishableError(ValueError):
    """Structurally valid schema that still cannot be published."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class SchemaFrozenError(ValueError):
    """A form that already has submissions cannot be edited."""

    def __init__(self, form_id: str, submission_count: int):
        self.form_id = form_id
        self.submission_count = submission_count
        super().__init__(
            f"Form {form_id} already has {submission_count} submission(s) and cannot be edited"
        )


class IncompleteSubmissionError(ValueError):
    """Required fields are unanswered; carries the per-page errors."""

    def __init__(self, pages: Optional[list] = None):
        self.pages = pages or []
        super().__init__("Please fill in all required fields.")


class NotFoundError(LookupError):
    pass


class NotificationError(RuntimeError):
    pass
