"""
Prometheus Metrics Module

Provides instrumentation for core operations:
- Ballot selections and confirmations
- Roster changes and election resets
- Simulated traffic
- Insight (LLM) calls
- API requests and errors

Usage:
    from server.metrics import metrics
    metrics.ballots_submitted.inc()
    metrics.record_llm_call("gemini-3-flash-preview", duration_seconds=1.2, success=True)
"""

from prometheus_client import Counter, Histogram, generate_latest, REGISTRY


class BallotMetrics:
    """Centralized metrics for the ballot service"""

    def __init__(self):
        # Ballot metrics
        self.ballots_submitted = Counter(
            'ballot_ballots_submitted_total',
            'Total ballots confirmed'
        )

        self.selections_recorded = Counter(
            'ballot_selections_recorded_total',
            'Selections recorded on in-progress ballots',
            ['kind']  # candidate/abstain
        )

        # Roster metrics
        self.roster_changes = Counter(
            'ballot_roster_changes_total',
            'Roster admin actions',
            ['action']  # add/rename/remove
        )

        self.election_resets = Counter(
            'ballot_election_resets_total',
            'Total election resets'
        )

        self.simulated_votes = Counter(
            'ballot_simulated_votes_total',
            'Votes added by the traffic simulator'
        )

        # LLM metrics
        self.llm_api_calls = Counter(
            'ballot_llm_api_calls_total',
            'Total insight API calls',
            ['model', 'status']
        )

        self.llm_api_duration = Histogram(
            'ballot_llm_api_duration_seconds',
            'Insight API call duration',
            ['model'],
            buckets=[0.5, 1, 2, 5, 10, 20, 30, 60]
        )

        # API metrics
        self.api_requests = Counter(
            'ballot_api_requests_total',
            'Total API requests',
            ['endpoint', 'method', 'status_code']
        )

        self.api_request_duration = Histogram(
            'ballot_api_request_duration_seconds',
            'API request duration',
            ['endpoint', 'method'],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
        )

        # Error metrics
        self.errors = Counter(
            'ballot_errors_total',
            'Total errors by component and type',
            ['component', 'error_type']
        )

    def record_llm_call(self, model: str, duration_seconds: float, success: bool = True):
        """Record an insight API call

        Args:
            model: Model name (e.g., "gemini-3-flash-preview")
            duration_seconds: API call duration
            success: Whether the call produced usable text
        """
        status = 'success' if success else 'error'
        self.llm_api_calls.labels(model=model, status=status).inc()

        if success:
            self.llm_api_duration.labels(model=model).observe(duration_seconds)

    def record_error(self, component: str, error: Exception):
        """Record an error

        Args:
            component: Component name (session/roster/insights/storage/api)
            error: Exception instance
        """
        error_type = type(error).__name__
        self.errors.labels(component=component, error_type=error_type).inc()


# Global metrics instance
metrics = BallotMetrics()


def get_metrics_text() -> str:
    """Get Prometheus metrics in text format

    Returns:
        Metrics text suitable for /metrics endpoint
    """
    return generate_latest(REGISTRY).decode('utf-8')
