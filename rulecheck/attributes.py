"""Dotted-path access to nested input records."""

import typing

from . import record as _record


def _descend(container: typing.Any, segment: str) -> tuple[bool, typing.Any]:
    """Take one step into a container.

    Args:
        container: Dictionary, list or tuple
        segment: Key, or index for sequences

    Returns:
        Tuple of (found, value)
    """
    if isinstance(container, dict):
        if segment in container:
            return True, container[segment]
        return False, None
    if isinstance(container, (list, tuple)):
        if segment.isdigit() and int(segment) < len(container):
            return True, container[int(segment)]
        return False, None
    return False, None


def _walk(container: typing.Any, path: str) -> tuple[bool, typing.Any]:
    if isinstance(container, dict) and path in container:
        return True, container[path]

    current = container
    for segment in path.split("."):
        found, current = _descend(current, segment)
        if not found:
            return False, None
    return True, current


def get_value(
    container: typing.Any, path: str | None, default: typing.Any = None
) -> typing.Any:
    """Resolve a dotted path against a nested container.

    A key that matches the path verbatim wins over dot-splitting, so keys that
    contain dots can still be addressed. Resolution is all-or-nothing: a
    partially resolved path returns the default.

    Args:
        container: Nested dictionaries and lists
        path: Dotted path such as ``"user.emails.0"``; None returns the container
        default: Value returned when the path does not resolve

    Returns:
        The resolved value or the default
    """
    if path is None:
        return container
    found, value = _walk(container, path)
    return value if found else default


def has_key(container: typing.Any, path: str) -> bool:
    """Check that a dotted path exists, regardless of the value it holds.

    Args:
        container: Nested dictionaries and lists
        path: Dotted path

    Returns:
        True if every segment of the path exists
    """
    found, _ = _walk(container, path)
    return found


def set_value(container: dict[str, typing.Any], path: str, value: typing.Any) -> None:
    """Assign a value at a dotted path, creating dictionaries on the way.

    Args:
        container: Dictionary to modify in place
        path: Dotted path
        value: Value to store
    """
    if path in container:
        container[path] = value
        return

    *parents, last = path.split(".")
    current: typing.Any = container
    for segment in parents:
        if isinstance(current, list) and segment.isdigit():
            current = current[int(segment)]
            continue
        if segment not in current or not isinstance(
            current[segment], (dict, list)
        ):
            current[segment] = {}
        current = current[segment]

    if isinstance(current, list) and last.isdigit():
        current[int(last)] = value
    else:
        current[last] = value


def flatten(container: typing.Any, prepend: str = "") -> dict[str, typing.Any]:
    """Flatten nested dictionaries and lists into dotted leaf keys.

    Empty dictionaries and lists produce no keys.

    Args:
        container: Nested dictionaries and lists
        prepend: Prefix for every produced key

    Returns:
        Dictionary of dotted key to leaf value
    """
    results: dict[str, typing.Any] = {}
    if isinstance(container, dict):
        items: typing.Iterable[tuple[typing.Any, typing.Any]] = container.items()
    else:
        items = enumerate(container)

    for key, value in items:
        if isinstance(value, (dict, list, tuple)):
            results.update(flatten(value, f"{prepend}{key}."))
        else:
            results[f"{prepend}{key}"] = value
    return results


def split_files(
    data: dict[str, typing.Any],
) -> tuple[dict[str, typing.Any], dict[str, typing.Any]]:
    """Separate top-level file uploads from ordinary values.

    Args:
        data: Input record

    Returns:
        Tuple of (data without files, files)
    """
    values: dict[str, typing.Any] = {}
    files: dict[str, typing.Any] = {}
    for key, value in data.items():
        if _record.is_file(value):
            files[key] = value
        else:
            values[key] = value
    return values, files
