"""
Structural field paths over nested form data.

A path is a tuple of segments: str for object keys, int for list indexes.
Paths are only rendered to dot/bracket text ("subExams[0].gender") for output.
"""
from typing import Any, Iterator, Tuple, Union

Segment = Union[str, int]
FieldPath = Tuple[Segment, ...]


def format_field_path(path: FieldPath) -> str:
    text = ""
    for segment in path:
        if isinstance(segment, int):
            text += f"[{segment}]"
        elif text:
            text += f".{segment}"
        else:
            text = segment
    return text


def iter_leaves(value: Any, prefix: FieldPath = ()) -> Iterator[Tuple[FieldPath, Any]]:
    """Yield (path, leaf) for every non-container value. Empty containers yield nothing."""
    if isinstance(value, dict):
        for key, item in value.items():
            yield from iter_leaves(item, prefix + (key,))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from iter_leaves(item, prefix + (index,))
    else:
        yield prefix, value


def is_filled(value: Any) -> bool:
    return value is not None and value != ""
