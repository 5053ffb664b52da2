import logging

import boto3
import pytest
from botocore.stub import Stubber

from ecr_scan_exporter.modules.get_variables import Settings
from ecr_scan_exporter.modules.prometheus import create_registry


@pytest.fixture
def ecr_client():
    return boto3.client(
        "ecr",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(ecr_client):
    with Stubber(ecr_client) as stub:
        yield stub


@pytest.fixture
def settings():
    return Settings(
        interval=300,
        crontab=None,
        repository="api",
        image_tag="develop",
        registry_id=None,
        region=None,
        timeout=60,
        max_pages=1000,
        metrics_port=8080,
        verbose_log=False,
    )


@pytest.fixture
def exporter():
    return create_registry("api", "develop")


@pytest.fixture
def logger():
    return logging.getLogger("ecr-scan-exporter-test")
