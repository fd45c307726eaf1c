"""SpiceDB authorization infrastructure.

- consistency.py: ConsistencyTracker (latest observed ZedToken)
- transaction_scope.py: TransactionScope (batched compensating deletes)
- debug_tracer.py: DebugTracer (debug trailers, check-trace rendering)
- spicedb_adapter.py: SpiceDBAdapter implementing AuthorizationProtocol
- schema.zed: schema pushed at startup
"""
