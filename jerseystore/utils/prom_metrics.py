"""
Prometheus metrics registration and helpers.

Exports:
- observe_request(...): record HTTP request count and latency per endpoint
- observe_cart_mutation(...): record cart adds/merges/updates/removals/checkouts
- observe_inquiry(...): record inquiries and requests created, with hand-off channel
- observe_status_transition(...): record admin status changes
- register_request_metrics(app): before/after request hooks feeding observe_request
- metrics_latest(): return text exposition from correct registry (handles multiprocess)
- CONTENT_TYPE_LATEST: correct Prometheus content type
"""

import os
import time
from flask import g, request
from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess


REQUEST_COUNTER = Counter(
    'js_http_requests_total', 'Total HTTP requests', ['endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'js_http_request_latency_seconds', 'HTTP request latency seconds', ['endpoint']
)

CART_MUTATIONS = Counter(
    'js_cart_mutations_total', 'Cart mutations', ['action']
)

INQUIRIES_CREATED = Counter(
    'js_inquiries_created_total', 'Inquiries and jersey requests created', ['kind', 'channel']
)

STATUS_TRANSITIONS = Counter(
    'js_status_transitions_total', 'Request/order status transitions', ['entity', 'status']
)


def observe_request(endpoint: str, status: int, latency_seconds: float) -> None:
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency_seconds)


def observe_cart_mutation(action: str) -> None:
    CART_MUTATIONS.labels(action=action).inc()


def observe_inquiry(kind: str, whatsapp: bool) -> None:
    INQUIRIES_CREATED.labels(kind=kind, channel='whatsapp' if whatsapp else 'form').inc()


def observe_status_transition(entity: str, status: str) -> None:
    STATUS_TRANSITIONS.labels(entity=entity, status=status).inc()


def register_request_metrics(app) -> None:
    """Time every request; unmatched URLs share one endpoint label"""

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _record_request(response):
        started = g.pop('request_started', None)
        if started is not None:
            endpoint = request.url_rule.rule if request.url_rule else 'unmatched'
            observe_request(endpoint, response.status_code, time.perf_counter() - started)
        return response


def metrics_latest() -> bytes:
    """Return the Prometheus text exposition, multiprocess-aware if configured."""
    prom_mp_dir = os.getenv('PROMETHEUS_MULTIPROC_DIR')
    if prom_mp_dir:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    return generate_latest()


__all__ = [
    'observe_request',
    'observe_cart_mutation',
    'observe_inquiry',
    'observe_status_transition',
    'register_request_metrics',
    'metrics_latest',
    'CONTENT_TYPE_LATEST',
]
