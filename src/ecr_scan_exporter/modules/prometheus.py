import threading, time
from collections import namedtuple

import prometheus_client
from prometheus_client.core import GaugeMetricFamily

from ecr_scan_exporter.modules.snapshot import (
    LABEL_NAMES,
    build_label_values,
    count_by_severity,
)

METRIC_PREFIX = "aws_custom_ecr_image_scan_findings"

Snapshot = namedtuple("Snapshot", ["label_values", "severity_counts", "timestamp"])

EMPTY_SNAPSHOT = Snapshot(label_values=(), severity_counts=(), timestamp=None)

class FindingsCollector(object):
    """Publishes the last successfully fetched set of scan findings.

    refresh() builds the complete new Snapshot before replacing the current
    one, and collect() renders a single Snapshot reference, so a scrape sees
    either the previous findings or the new ones and never a mix.
    """

    def __init__(self, repository, image_tag):
        self.repository = repository
        self.image_tag = image_tag
        self._lock = threading.Lock()
        self._snapshot = EMPTY_SNAPSHOT

    @property
    def snapshot(self):
        with self._lock:
            return self._snapshot

    def refresh(self, records, timestamp=None):
        label_values = build_label_values(records)
        snapshot = Snapshot(
            label_values=label_values,
            severity_counts=tuple(count_by_severity(label_values).items()),
            timestamp=time.time() if timestamp is None else timestamp,
        )
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def collect(self):
        snapshot = self.snapshot

        findings = GaugeMetricFamily(
            METRIC_PREFIX,
            'ECR Image Scan Findings',
            labels=LABEL_NAMES,
        )
        for label_values in snapshot.label_values:
            findings.add_metric(label_values, 1)
        yield findings

        severity = GaugeMetricFamily(
            METRIC_PREFIX + '_severity',
            'ECR Image Scan Findings by severity',
            labels=['repository', 'image_tag', 'severity'],
        )
        for name, count in snapshot.severity_counts:
            severity.add_metric([self.repository, self.image_tag, name], count)
        yield severity

        if snapshot.timestamp is not None:
            yield GaugeMetricFamily(
                METRIC_PREFIX + '_last_refresh_timestamp_seconds',
                'Time of the last successful ECR Image Scan Findings refresh',
                value=snapshot.timestamp,
            )

def create_registry(repository, image_tag):
    registry = prometheus_client.CollectorRegistry()
    collector = FindingsCollector(repository, image_tag)
    registry.register(collector)
    return registry, collector

"""Start Prometheus Exporter"""
def startup_prometheus_client(logger, registry, port):
    prometheus_client.start_http_server(port, registry=registry)
    logger.info("Prometheus Exporter started on port %d..." % port)
