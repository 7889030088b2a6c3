"""Transformations for pre-processing records before validation."""

import copy
import typing

from . import attributes as _attributes

_MISSING = object()


class Transform:
    """A transformation applied to a record before its rules run.

    Attributes:
        func: Transformation function
        field: Dotted attribute path to transform (None for record-level transform)
    """

    def __init__(
        self,
        func: typing.Callable[[typing.Any], typing.Any],
        field: str | None = None,
    ) -> None:
        """Initialize Transform.

        Args:
            func: Function to apply (attribute value for field-level, dict for record-level)
            field: Dotted path for a field-level transform (None for record-level)
        """
        self.func = func
        self.field = field

    def __repr__(self) -> str:
        return f"Transform({getattr(self.func, '__name__', self.func)!r}, field={self.field!r})"


def _apply(record: dict[str, typing.Any], transform: Transform, field: str | None) -> dict[str, typing.Any]:
    if field is None:
        result = transform.func(record)
        if not isinstance(result, dict):
            raise ValueError(
                f"Record-level transform must return dict, got {type(result)}"
            )
        return result

    current = _attributes.get_value(record, field, _MISSING)
    if current is not _MISSING:
        _attributes.set_value(record, field, transform.func(current))
    return record


def apply_transforms(
    record: dict[str, typing.Any],
    transforms: dict[str, Transform] | list[Transform] | None,
) -> dict[str, typing.Any]:
    """Apply transformations to a record.

    Field-level transforms skip attributes the record does not have. The
    input record is never modified. In the mapping form each key is the
    dotted path its Transform applies to, unless the Transform names its
    own field; record-level transforms go in the list form.

    Args:
        record: Dictionary record to transform
        transforms: Mapping of dotted path to Transform, or a list of Transforms

    Returns:
        Transformed copy of the record

    Raises:
        ValueError: If a record-level transform does not return a dict
    """
    if transforms is None:
        return record

    result = copy.deepcopy(record)
    if isinstance(transforms, dict):
        for field_name, transform in transforms.items():
            result = _apply(result, transform, transform.field or field_name)
    else:
        for transform in transforms:
            result = _apply(result, transform, transform.field)
    return result
