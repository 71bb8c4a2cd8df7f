"""
Analytics component - usage event recording and aggregation.
"""

from ._aggregate import period_summary, recent_activity, scan_order, top_posts
from ._impl import (
    SESSION_KEY,
    build_event,
    describe_event,
    generate_session_id,
    get_or_create_session_id,
    parse_event,
    parse_events,
)
from .component import (
    DEFAULT_COLLECTION,
    AnalyticsRecorder,
    ScanAggregator,
    load_dashboard,
    run_record,
)
from .models import (
    ActivityItem,
    DashboardSnapshot,
    PeriodSummary,
    RecordEventInput,
    RecordEventOutput,
    TopPost,
)
from .ports import AnalyticsAggregatorPort, SessionStoragePort

__all__ = [
    # Component entry points
    "run_record",
    "load_dashboard",
    "AnalyticsRecorder",
    "ScanAggregator",
    # Pure aggregation
    "top_posts",
    "recent_activity",
    "period_summary",
    "scan_order",
    # Helpers
    "build_event",
    "describe_event",
    "generate_session_id",
    "get_or_create_session_id",
    "parse_event",
    "parse_events",
    # Models
    "ActivityItem",
    "DashboardSnapshot",
    "PeriodSummary",
    "RecordEventInput",
    "RecordEventOutput",
    "TopPost",
    # Ports
    "AnalyticsAggregatorPort",
    "SessionStoragePort",
    # Constants
    "DEFAULT_COLLECTION",
    "SESSION_KEY",
]
