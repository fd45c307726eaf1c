"""SpiceDB debug tracing.

When debugging is on, outbound calls send the request-debug header and
SpiceDB answers with trailer metadata: cache and dispatch counters on most
calls, and a JSON encoded DebugInformation (check trace) on permission
checks. The tracer renders the trace as a tree and logs it at debug level.

Tracing is observational only. Malformed trailers are logged and dropped,
never turned into call failures.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Final

from authzed.api.v1.debug_pb2 import CheckDebugTrace, DebugInformation
from google.protobuf import json_format

if TYPE_CHECKING:
    from authzed.api.v1.core_pb2 import SubjectReference

    from relauthz.domain.protocols.logger_protocol import LoggerProtocol


REQUEST_DEBUG_INFORMATION: Final = "io.spicedb.requestdebuginfo"
CACHED_OPERATIONS_COUNT: Final = "io.spicedb.respmeta.cachedoperationscount"
DISPATCHED_OPERATIONS_COUNT: Final = "io.spicedb.respmeta.dispatchedoperationscount"
DEBUG_INFORMATION: Final = "io.spicedb.respmeta.debuginfo"

_RESULT_ICONS: Final = {
    CheckDebugTrace.PERMISSIONSHIP_HAS_PERMISSION: "✓",
    CheckDebugTrace.PERMISSIONSHIP_NO_PERMISSION: "⨉",
    CheckDebugTrace.PERMISSIONSHIP_CONDITIONAL_PERMISSION: "?",
}


class DebugTracer:
    """Requests and renders SpiceDB debug trailers."""

    def __init__(self, logger: "LoggerProtocol") -> None:
        self._logger = logger

    @property
    def request_metadata(self) -> tuple[tuple[str, str], ...]:
        """gRPC metadata asking SpiceDB for debug trailers."""
        return ((REQUEST_DEBUG_INFORMATION, "true"),)

    def report(
        self,
        trailers: Iterable[tuple[str, str | bytes]] | None,
        **context: Any,
    ) -> None:
        """Parse trailer metadata and log it.

        Args:
            trailers: Trailing metadata of the finished call.
            **context: Extra log context (rpc name, relationships, ...).
        """
        metadata = _as_dict(trailers)
        if not metadata:
            return

        fields: dict[str, Any] = dict(context)
        for key, name in (
            (CACHED_OPERATIONS_COUNT, "cached_operations_count"),
            (DISPATCHED_OPERATIONS_COUNT, "dispatched_operations_count"),
        ):
            count = _int_value(metadata.get(key))
            if count is not None:
                fields[name] = count

        message = "debug_rpc"
        raw_debug = metadata.get(DEBUG_INFORMATION)
        # Only present on permission checks
        if raw_debug is not None:
            debug_info = DebugInformation()
            try:
                json_format.Parse(raw_debug, debug_info, ignore_unknown_fields=True)
            except json_format.ParseError as e:
                self._logger.debug("debug_rpc_parse_failed", error=str(e), **context)
                return

            if not debug_info.HasField("check"):
                self._logger.debug("debug_rpc_no_check_trace", **context)
                return
            message = render_check_trace(debug_info.check)

        self._logger.debug(message, **fields)


def render_check_trace(trace: CheckDebugTrace) -> str:
    """Render a check trace as an indented tree.

    Example output::

        ✓ workspace:w1 read (permission) 1.20ms
        └── ✓ organization:o1 workspace_read (relation) 0.40ms
            └── ✓ org_role:admin has_role (permission) cached
    """
    lines: list[str] = []
    _render(trace, lines, prefix="", connector="")
    return "\n".join(lines)


def _render(
    trace: CheckDebugTrace, lines: list[str], *, prefix: str, connector: str
) -> None:
    lines.append(f"{prefix}{connector}{_describe(trace)}")

    if trace.WhichOneof("resolution") != "sub_problems":
        return

    if connector == "":
        child_prefix = prefix
    elif connector.startswith("└"):
        child_prefix = prefix + "    "
    else:
        child_prefix = prefix + "│   "

    children = list(trace.sub_problems.traces)
    for index, child in enumerate(children):
        last = index == len(children) - 1
        _render(
            child,
            lines,
            prefix=child_prefix,
            connector="└── " if last else "├── ",
        )


def _describe(trace: CheckDebugTrace) -> str:
    icon = _RESULT_ICONS.get(trace.result, "-")
    kind = (
        "relation"
        if trace.permission_type == CheckDebugTrace.PERMISSION_TYPE_RELATION
        else "permission"
    )
    resource = f"{trace.resource.object_type}:{trace.resource.object_id}"
    parts = [icon, resource, trace.permission, f"({kind})"]
    resolution = trace.WhichOneof("resolution")

    if resolution == "was_cached_result" and trace.was_cached_result:
        parts.append("cached")
    elif trace.HasField("duration"):
        parts.append(f"{trace.duration.ToMicroseconds() / 1000:.2f}ms")

    if resolution != "sub_problems" and trace.HasField("subject"):
        parts.append(f"-> {_subject_text(trace.subject)}")
    return " ".join(parts)


def _subject_text(subject: "SubjectReference") -> str:
    text = f"{subject.object.object_type}:{subject.object.object_id}"
    if subject.optional_relation:
        text += f"#{subject.optional_relation}"
    return text


def _as_dict(trailers: Iterable[tuple[str, str | bytes]] | None) -> dict[str, str]:
    if not trailers:
        return {}
    metadata: dict[str, str] = {}
    for key, value in trailers:
        metadata[key.lower()] = (
            value.decode("utf-8", errors="replace")
            if isinstance(value, bytes)
            else value
        )
    return metadata


def _int_value(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
