"""
Unit tests for the shared observability instances.
"""

from studyrooms import handlers
from studyrooms.handlers.utils import observability


class TestObservability:
    """Test cases for the shared logger, tracer and metrics."""

    def test_metrics_namespace(self):
        assert observability.METRICS_NAMESPACE == "StudyRooms"

    def test_handlers_share_instances(self):
        assert handlers.logger is observability.logger
        assert handlers.tracer is observability.tracer
        assert handlers.metrics is observability.metrics
