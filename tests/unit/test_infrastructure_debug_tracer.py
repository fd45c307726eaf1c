"""Unit tests for DebugTracer (SpiceDB debug trailers).

Tests cover:
- Counter trailers
- Check trace rendering as a tree
- Malformed debug information is logged and dropped
"""

import pytest
from authzed.api.v1.core_pb2 import ObjectReference, SubjectReference
from authzed.api.v1.debug_pb2 import CheckDebugTrace, DebugInformation
from google.protobuf import json_format
from google.protobuf.duration_pb2 import Duration

from relauthz.infrastructure.authorization.debug_tracer import (
    CACHED_OPERATIONS_COUNT,
    DEBUG_INFORMATION,
    DISPATCHED_OPERATIONS_COUNT,
    REQUEST_DEBUG_INFORMATION,
    DebugTracer,
    render_check_trace,
)


def _trace(
    object_type: str,
    object_id: str,
    permission: str,
    *,
    result=CheckDebugTrace.PERMISSIONSHIP_HAS_PERMISSION,
    relation: bool = False,
    **kwargs,
) -> CheckDebugTrace:
    return CheckDebugTrace(
        resource=ObjectReference(object_type=object_type, object_id=object_id),
        permission=permission,
        permission_type=(
            CheckDebugTrace.PERMISSION_TYPE_RELATION
            if relation
            else CheckDebugTrace.PERMISSION_TYPE_PERMISSION
        ),
        result=result,
        **kwargs,
    )


@pytest.fixture
def check_trace():
    leaf = _trace(
        "org_role",
        "admin",
        "member",
        relation=True,
        subject=SubjectReference(
            object=ObjectReference(object_type="user", object_id="u1")
        ),
    )
    cached = _trace(
        "workspace",
        "w1",
        "owner",
        result=CheckDebugTrace.PERMISSIONSHIP_NO_PERMISSION,
        relation=True,
        was_cached_result=True,
    )
    via_role = _trace(
        "org_role",
        "admin",
        "has_role",
        sub_problems=CheckDebugTrace.SubProblems(traces=[leaf]),
    )
    return _trace(
        "workspace",
        "w1",
        "read",
        duration=Duration(nanos=1_500_000),
        sub_problems=CheckDebugTrace.SubProblems(traces=[cached, via_role]),
    )


@pytest.fixture
def tracer(mock_logger):
    return DebugTracer(mock_logger)


@pytest.mark.unit
class TestRenderCheckTrace:
    """Test tree rendering."""

    def test_renders_tree(self, check_trace):
        rendered = render_check_trace(check_trace)

        assert rendered.splitlines() == [
            "✓ workspace:w1 read (permission) 1.50ms",
            "├── ⨉ workspace:w1 owner (relation) cached",
            "└── ✓ org_role:admin has_role (permission)",
            "    └── ✓ org_role:admin member (relation) -> user:u1",
        ]

    def test_conditional_icon(self):
        trace = _trace(
            "template",
            "t1",
            "read",
            result=CheckDebugTrace.PERMISSIONSHIP_CONDITIONAL_PERMISSION,
        )

        assert render_check_trace(trace).startswith("? template:t1 read")

    def test_nested_middle_child_uses_vertical_bar(self):
        grandchild = _trace("org_role", "r", "member", relation=True)
        middle = _trace(
            "organization",
            "o1",
            "workspace_read",
            sub_problems=CheckDebugTrace.SubProblems(traces=[grandchild]),
        )
        last = _trace("workspace", "w1", "owner", relation=True)
        root = _trace(
            "workspace",
            "w1",
            "read",
            sub_problems=CheckDebugTrace.SubProblems(traces=[middle, last]),
        )

        lines = render_check_trace(root).splitlines()

        assert lines[2] == "│   └── ✓ org_role:r member (relation)"
        assert lines[3].startswith("└── ")


@pytest.mark.unit
class TestDebugTracerReport:
    """Test trailer parsing and logging."""

    def test_request_metadata(self, tracer):
        assert tracer.request_metadata == ((REQUEST_DEBUG_INFORMATION, "true"),)

    def test_logs_counters(self, tracer, mock_logger):
        tracer.report(
            [(CACHED_OPERATIONS_COUNT, "3"), (DISPATCHED_OPERATIONS_COUNT, b"5")],
            rpc="WriteRelationships",
        )

        mock_logger.debug.assert_called_once_with(
            "debug_rpc",
            rpc="WriteRelationships",
            cached_operations_count=3,
            dispatched_operations_count=5,
        )

    def test_non_numeric_counter_is_skipped(self, tracer, mock_logger):
        tracer.report([(CACHED_OPERATIONS_COUNT, "many")], rpc="CheckPermission")

        mock_logger.debug.assert_called_once_with("debug_rpc", rpc="CheckPermission")

    def test_logs_rendered_check_trace(self, tracer, mock_logger, check_trace):
        payload = json_format.MessageToJson(DebugInformation(check=check_trace))

        tracer.report(
            [(DEBUG_INFORMATION, payload), (DISPATCHED_OPERATIONS_COUNT, "2")],
            rpc="CheckPermission",
        )

        message = mock_logger.debug.call_args.args[0]
        assert message == render_check_trace(check_trace)
        assert mock_logger.debug.call_args.kwargs["dispatched_operations_count"] == 2

    def test_malformed_debug_information_is_dropped(self, tracer, mock_logger):
        tracer.report([(DEBUG_INFORMATION, "{not json")], rpc="CheckPermission")

        mock_logger.debug.assert_called_once()
        assert mock_logger.debug.call_args.args[0] == "debug_rpc_parse_failed"

    def test_debug_information_without_check(self, tracer, mock_logger):
        tracer.report([(DEBUG_INFORMATION, "{}")], rpc="CheckPermission")

        mock_logger.debug.assert_called_once_with(
            "debug_rpc_no_check_trace", rpc="CheckPermission"
        )

    @pytest.mark.parametrize("trailers", [None, ()])
    def test_no_trailers_logs_nothing(self, tracer, mock_logger, trailers):
        tracer.report(trailers, rpc="ReadRelationships")

        mock_logger.debug.assert_not_called()

    def test_trailer_keys_are_case_insensitive(self, tracer, mock_logger):
        tracer.report([(CACHED_OPERATIONS_COUNT.upper(), "1")])

        mock_logger.debug.assert_called_once_with(
            "debug_rpc", cached_operations_count=1
        )
