from croniter import croniter
from datetime import datetime
import threading, time

from ecr_scan_exporter.modules.ecr_client import fetch_all_findings
from ecr_scan_exporter.modules.errors import FetchError
from ecr_scan_exporter.modules.snapshot import build_records

"""Get next run time from now, based on schedule specified by cron string"""
def getNextCronRunTime(schedule, now=None):
    if now is None:
        now = datetime.now()
    return croniter(schedule, now).get_next(datetime)

"""Seconds to wait before the next cycle; ticks missed by a slow cycle are skipped"""
def getSleepTime(settings, started, finished, now=None):
    if settings.crontab:
        if now is None:
            now = datetime.now()
        return max(0.0, (getNextCronRunTime(settings.crontab, now) - now).total_seconds())
    elapsed = finished - started
    return settings.interval - (elapsed % settings.interval)

def refresh_cycle(logger, client, collector, settings):
    """Fetch, flatten and publish the findings once.

    Returns True when the snapshot was replaced. A FetchError is logged and
    the previous snapshot is left as it is.
    """
    logger.info("Refreshing ECR Image Scan Findings of %s:%s" % (settings.repository, settings.image_tag))
    deadline = time.monotonic() + settings.timeout
    try:
        findings = fetch_all_findings(
            client,
            settings.repository,
            settings.image_tag,
            registry_id=settings.registry_id,
            max_pages=settings.max_pages,
            deadline=deadline,
        )
    except FetchError as e:
        logger.error("failed to read ECR Image Scan Findings infos: %s" % e)
        return False

    records = build_records(findings, verbose=settings.verbose_log)
    snapshot = collector.refresh(records)
    logger.info("Published %d findings (%d samples)" % (len(records), len(snapshot.label_values)))
    return True

def refresh_loop(logger, client, collector, settings, stop_event):
    while not stop_event.is_set():
        started = time.monotonic()
        try:
            refresh_cycle(logger, client, collector, settings)
        except Exception:
            logger.exception("ECR Image Scan Findings refresh failed")
        sleep_time = getSleepTime(settings, started, time.monotonic())
        logger.debug("next refresh in %.1f seconds" % sleep_time) # DEBUG-LOG
        stop_event.wait(sleep_time)

"""Start the refresh loop as a background thread"""
def start_refresh_loop(logger, client, collector, settings):
    stop_event = threading.Event()
    thread = threading.Thread(
        target=refresh_loop,
        args=(logger, client, collector, settings, stop_event),
        name="refresh-loop",
        daemon=True,
    )
    thread.start()
    logger.info("Refresh loop started...")
    return thread, stop_event
