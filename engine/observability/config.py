# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
OpenTelemetry Configuration

Sets up tracing and logging for the civic issue engine. Sampling, exporters
and log levels depend on the deployment environment.
"""

import logging
from typing import Optional
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

from config import Settings, load_settings

logger = logging.getLogger(__name__)

SAMPLING_RATIOS = {
    'production': 0.1,
    'staging': 0.5,
    'development': 1.0
}

LOG_LEVELS = {
    'production': logging.WARNING,
    'staging': logging.INFO,
    'development': logging.INFO
}


def build_tracer_provider(settings: Settings) -> TracerProvider:
    """
    Build a tracer provider for the configured environment.

    Args:
        settings: Engine settings; an otlp_endpoint of None disables OTLP export

    Returns:
        TracerProvider with environment-specific sampler and exporters
    """
    sampler = TraceIdRatioBased(SAMPLING_RATIOS.get(settings.environment, 1.0))

    resource = Resource.create({
        "service.name": settings.service_name,
        "service.version": settings.service_version,
        "deployment.environment": settings.environment
    })

    tracer_provider = TracerProvider(sampler=sampler, resource=resource)

    if settings.otlp_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint), max_export_batch_size=512)
        )

    if settings.environment == 'development':
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    return tracer_provider


def setup_observability(settings: Optional[Settings] = None) -> bool:
    """
    Initialize OpenTelemetry and logging from configuration.

    Returns:
        True when a tracer provider was installed
    """
    settings = settings or load_settings()
    setup_structured_logging(settings.environment)

    if not settings.otel_enabled:
        logger.info("Tracing disabled")
        return False

    trace.set_tracer_provider(build_tracer_provider(settings))
    logger.info(
        "Tracing enabled",
        extra={"environment": settings.environment, "otlp_export": bool(settings.otlp_endpoint)}
    )
    return True


def setup_structured_logging(environment: str) -> None:
    """Configure root logging and per-package levels for the environment."""
    logging.basicConfig(
        level=LOG_LEVELS.get(environment, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if environment == 'production':
        logging.getLogger('pymongo').setLevel(logging.WARNING)

    elif environment == 'development':
        logging.getLogger('domain').setLevel(logging.DEBUG)
        logging.getLogger('services').setLevel(logging.DEBUG)
