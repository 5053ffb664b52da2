#!/usr/bin/env python3

import sys

from botocore.exceptions import BotoCoreError

from ecr_scan_exporter.modules.helper_functions import get_logger
from ecr_scan_exporter.modules.errors import ConfigError
from ecr_scan_exporter.modules.get_variables import get_settings
from ecr_scan_exporter.modules.ecr_client import get_ecr_client
from ecr_scan_exporter.modules.prometheus import (
    create_registry,
    startup_prometheus_client,
)
from ecr_scan_exporter.modules.timer import start_refresh_loop

#############################################################################
# Logging
#############################################################################

logger = get_logger("ecr-scan-exporter")

#############################################################################
# Initialization
#############################################################################

def main():
    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error(e)
        return 1

    registry, collector = create_registry(settings.repository, settings.image_tag)
    try:
        client = get_ecr_client(settings.region, settings.timeout)
    except BotoCoreError as e:
        logger.error("failed to create ECR client: %s" % e)
        return 1

    try:
        startup_prometheus_client(logger, registry, settings.metrics_port)
    except OSError as e:
        logger.error("failed to start Prometheus Exporter: %s" % e)
        return 1

    thread, stop_event = start_refresh_loop(logger, client, collector, settings)
    try:
        while thread.is_alive():
            thread.join(1)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        stop_event.set()
    return 0

if __name__ == "__main__":
    sys.exit(main())
