"""
Prometheus Metrics

Defines application metrics for monitoring:
- Request counters
- Duration histograms
- Submission outcomes
"""

from prometheus_client import Counter, Histogram, Gauge


# ===================================
# HTTP Metrics
# ===================================

requests_total = Counter(
    "ppr_relay_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"],
)

requests_duration = Histogram(
    "ppr_relay_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

active_requests = Gauge(
    "ppr_relay_active_requests",
    "Number of active HTTP requests",
)


# ===================================
# Relay Metrics
# ===================================

submissions_total = Counter(
    "ppr_relay_submissions_total",
    "Form submissions by outcome",
    ["outcome"],
)

mail_send_duration = Histogram(
    "ppr_relay_mail_send_duration_seconds",
    "Time spent waiting on the mail provider",
    ["transport"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0, 30.0, 60.0],
)


# ===================================
# Helper Functions
# ===================================

def record_submission(outcome: str):
    """
    Record the outcome of one form submission.

    Args:
        outcome: sent, empty, invalid, too_large, misconfigured or failed
    """
    submissions_total.labels(outcome=outcome).inc()


def record_mail_send(transport: str, duration: float):
    """
    Record how long one mail-send call took.

    Args:
        transport: Transport name (resend or smtp)
        duration: Duration in seconds
    """
    mail_send_duration.labels(transport=transport).observe(duration)
