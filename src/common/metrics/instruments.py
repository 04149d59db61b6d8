"""
OpenTelemetry metrics for the listings map engine.

Exports geocoding and ingestion metrics (lookup outcomes, lookup latency,
resolved coordinates by source, ingested listings) via OTLP to an
OpenTelemetry Collector.

Metrics are fire-and-forget: if the collector is down, the app continues normally.
"""

import os

from opentelemetry import metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from common.logging_config import get_logger

logger = get_logger("common_metrics")

# OTEL Collector endpoint (default: localhost:4317 for gRPC)
OTEL_ENDPOINT = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")

# Setup OTEL metrics
_resource = Resource.create({"service.name": "listings-map-engine"})

try:
    _exporter = OTLPMetricExporter(endpoint=OTEL_ENDPOINT, insecure=True)
    _reader = PeriodicExportingMetricReader(_exporter, export_interval_millis=5000)
    _provider = MeterProvider(resource=_resource, metric_readers=[_reader])
    metrics.set_meter_provider(_provider)
    logger.info(f"OpenTelemetry metrics enabled, exporting to {OTEL_ENDPOINT}")
except Exception as e:
    logger.warning(f"OpenTelemetry setup failed (metrics disabled): {e}")
    _provider = None

# Create meter and instruments
_meter = metrics.get_meter("listings_map", version="1.0.0")

geocode_requests = _meter.create_counter(
    name="geocode.requests",
    description="External geocoding requests, by outcome",
    unit="requests",
)

geocode_duration = _meter.create_histogram(
    name="geocode.duration",
    description="External geocoding request duration (ms)",
    unit="ms",
)

coordinates_resolved = _meter.create_counter(
    name="coordinates.resolved",
    description="Coordinates written to the session cache, by source",
    unit="coordinates",
)

listings_ingested = _meter.create_counter(
    name="listings.ingested",
    description="Unique listings added to a session working set",
    unit="listings",
)
