import os
from collections import namedtuple

from croniter import croniter

from ecr_scan_exporter.modules.errors import ConfigError
from ecr_scan_exporter.modules.helper_functions import var_test, get_logger

logger = get_logger(__name__)

DEFAULT_INTERVAL = 300
DEFAULT_REPOSITORY_NAME = "api"
DEFAULT_IMAGE_TAG = "develop"
DEFAULT_TIMEOUT = 60
DEFAULT_MAX_PAGES = 1000
DEFAULT_METRICS_PORT = 8080

Settings = namedtuple("Settings", [
    "interval",
    "crontab",
    "repository",
    "image_tag",
    "registry_id",
    "region",
    "timeout",
    "max_pages",
    "metrics_port",
    "verbose_log",
])

def get_int(environ, name, default, minimum=1):
    value = environ.get(name, "").strip()
    if not value:
        return default
    try:
        integer_value = int(value)
    except ValueError as e:
        raise ConfigError("failed to read %s: %r is not an integer" % (name, value)) from e
    if integer_value < minimum:
        raise ConfigError("failed to read %s: must be >= %d, got %d" % (name, minimum, integer_value))
    return integer_value

"""Poll interval in seconds, AWS_API_INTERVAL or 300"""
def get_interval(environ=None):
    if environ is None:
        environ = os.environ
    return get_int(environ, "AWS_API_INTERVAL", DEFAULT_INTERVAL)

"""Optional cron schedule, replaces the interval when set"""
def get_crontab(environ=None):
    if environ is None:
        environ = os.environ
    crontab = environ.get("AWS_API_CRONTAB", "").strip()
    if not crontab:
        return None
    if not croniter.is_valid(crontab):
        raise ConfigError("failed to read AWS_API_CRONTAB: %r is not a valid cron expression" % crontab)
    logger.debug("crontab: %s" % crontab) # DEBUG-LOG
    return crontab

def get_settings(environ=None):
    if environ is None:
        environ = os.environ

    settings = Settings(
        interval=get_interval(environ),
        crontab=get_crontab(environ),
        repository=environ.get("ECR_REPOSITORY_NAME") or DEFAULT_REPOSITORY_NAME,
        image_tag=environ.get("ECR_IMAGE_TAG") or DEFAULT_IMAGE_TAG,
        registry_id=environ.get("ECR_REGISTRY_ID") or None,
        region=environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or None,
        timeout=get_int(environ, "AWS_API_TIMEOUT", DEFAULT_TIMEOUT),
        max_pages=get_int(environ, "AWS_API_MAX_PAGES", DEFAULT_MAX_PAGES),
        metrics_port=get_int(environ, "METRICS_PORT", DEFAULT_METRICS_PORT),
        verbose_log=var_test(environ.get("VERBOSE_LOG", False)),
    )

    if settings.crontab:
        logger.info("Refresh schedule: crontab %s" % settings.crontab)
    else:
        logger.info("Refresh schedule: every %d seconds" % settings.interval)
    logger.debug("settings: %s" % format(settings)) # DEBUG-LOG
    return settings
