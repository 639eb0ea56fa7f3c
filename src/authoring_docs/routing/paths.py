"""Compile Express-style route paths into regular expressions.

Supported segments:
- `:name`   one path segment, captured as `name`
- `:name?`  an optional path segment
- `*`       anything, including slashes

Matching is case-insensitive, anchored at both ends and tolerates one
trailing slash, the same defaults the application's router uses.
"""

import re

from authoring_docs.errors import PathPatternError

_PARAM_NAME = re.compile(r"^[A-Za-z_]\w*$")
_RESERVED_CHARS = set("()[]{}?*:+")


def compile_path(path: str) -> re.Pattern:
    """Compile `path` into a pattern; raise PathPatternError if it is malformed."""
    if not path.startswith("/"):
        raise PathPatternError(f"route path must start with '/': {path!r}")

    parts = []
    seen: set[str] = set()
    for segment in path.split("/"):
        if not segment:
            continue
        if segment == "*":
            parts.append("/(.*)")
        elif segment.startswith(":"):
            parts.append(_param_segment(segment, seen, path))
        elif _RESERVED_CHARS & set(segment):
            raise PathPatternError(f"unsupported characters in segment {segment!r} of {path!r}")
        else:
            parts.append("/" + re.escape(segment))

    return re.compile("^" + "".join(parts) + "/?$", re.IGNORECASE)


def path_params(path: str) -> list[tuple[str, bool]]:
    """List `(name, required)` for every parameter segment in `path`."""
    params = []
    for segment in path.split("/"):
        if segment.startswith(":"):
            optional = segment.endswith("?")
            params.append((segment[1:].rstrip("?"), not optional))
    return params


def _param_segment(segment: str, seen: set[str], path: str) -> str:
    optional = segment.endswith("?")
    name = segment[1:-1] if optional else segment[1:]
    if not _PARAM_NAME.match(name):
        raise PathPatternError(f"invalid parameter {segment!r} in {path!r}")
    if name in seen:
        raise PathPatternError(f"duplicate parameter {name!r} in {path!r}")
    seen.add(name)

    group = f"(?P<{name}>[^/]+?)"
    if optional:
        return f"(?:/{group})?"
    return f"/{group}"
