"""Type aliases and value types for validation inputs."""

import typing

import pydantic


Record = dict | pydantic.BaseModel
"""Type alias for a record that can be validated.

A Record can be either a dictionary or a Pydantic BaseModel instance.
"""

RuleExpression = str | typing.Sequence[typing.Any]
"""A single rule expression.

Either a string such as ``"between:1,10"`` or a pre-built
``("between", ["1", "10"])`` pair.
"""

RuleSetInput = typing.Mapping[str, str | typing.Sequence[RuleExpression]]
"""Mapping of attribute path to its rules.

Rules may be a pipe-delimited string or a list of rule expressions.
"""


class FileUpload(pydantic.BaseModel):
    """An uploaded file included in the input record.

    Attributes:
        name: Client-side file name, used for extension checks
        size: Size in bytes
        tmp_name: Temporary location of the upload; empty when nothing was stored
        error: Upload error code, 0 when the upload succeeded
        mime_type: Optional MIME type reported by the client
    """

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    size: int = 0
    tmp_name: str = ""
    error: int = 0
    mime_type: str | None = None

    @property
    def kilobytes(self) -> float:
        """Size of the upload in kilobytes."""
        return self.size / 1024

    @property
    def extension(self) -> str:
        """Lower-cased file extension without the dot, or an empty string."""
        _, dot, ext = self.name.rpartition(".")
        return ext.lower() if dot else ""

    @property
    def is_valid(self) -> bool:
        """True if the upload completed without an error."""
        return self.error == 0


def is_file(value: typing.Any) -> bool:
    """Check whether a value is a file upload.

    Args:
        value: Any input value

    Returns:
        True if value is a FileUpload
    """
    return isinstance(value, FileUpload)


def _plain(value: typing.Any) -> typing.Any:
    """Unwrap nested models into dictionaries, keeping file uploads intact."""
    if isinstance(value, FileUpload):
        return value
    if isinstance(value, pydantic.BaseModel):
        return {key: _plain(item) for key, item in value}
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def to_dict(record: Record) -> dict[str, typing.Any]:
    """Convert a record to a plain dictionary.

    Args:
        record: Dictionary or Pydantic model

    Returns:
        A shallow copy of the record as a dictionary. Nested Pydantic models
        become dictionaries; FileUpload values are kept as they are.
    """
    if isinstance(record, dict):
        return record.copy()
    if isinstance(record, pydantic.BaseModel):
        return _plain(record)
    if hasattr(record, "__dict__"):
        return dict(record.__dict__)
    return dict(record) if hasattr(record, "__iter__") else {}
