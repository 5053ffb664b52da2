import time

import pytest
from botocore.exceptions import EndpointConnectionError

from fakes import make_finding, make_page, request_params
from ecr_scan_exporter.modules.ecr_client import fetch_all_findings, get_ecr_client
from ecr_scan_exporter.modules.errors import FetchError, PaginationExhaustedError


def test_single_page_without_token(ecr_client, stubber):
    stubber.add_response(
        "describe_image_scan_findings",
        make_page([make_finding("CVE-1", "HIGH")]),
        request_params(),
    )

    findings = fetch_all_findings(ecr_client, "api", "develop")

    assert [f["name"] for f in findings] == ["CVE-1"]
    stubber.assert_no_pending_responses()


def test_follows_next_token_until_absent(ecr_client, stubber):
    stubber.add_response(
        "describe_image_scan_findings",
        make_page([make_finding("CVE-1", "HIGH"), make_finding("CVE-2", "LOW")], "tok1"),
        request_params(),
    )
    stubber.add_response(
        "describe_image_scan_findings",
        make_page([make_finding("CVE-3", "MEDIUM")], "tok2"),
        request_params("tok1"),
    )
    stubber.add_response(
        "describe_image_scan_findings",
        make_page([make_finding("CVE-4", "CRITICAL")]),
        request_params("tok2"),
    )

    findings = fetch_all_findings(ecr_client, "api", "develop")

    assert [f["name"] for f in findings] == ["CVE-1", "CVE-2", "CVE-3", "CVE-4"]
    stubber.assert_no_pending_responses()


def test_registry_id_is_sent(ecr_client, stubber):
    params = request_params()
    params["registryId"] = "123456789012"
    stubber.add_response("describe_image_scan_findings", make_page([]), params)

    assert fetch_all_findings(ecr_client, "api", "develop", registry_id="123456789012") == []
    stubber.assert_no_pending_responses()


def test_page_without_findings_section(ecr_client, stubber):
    stubber.add_response(
        "describe_image_scan_findings",
        {"repositoryName": "api", "nextToken": "tok1"},
        request_params(),
    )
    stubber.add_response(
        "describe_image_scan_findings",
        make_page([make_finding("CVE-1", "LOW")]),
        request_params("tok1"),
    )

    findings = fetch_all_findings(ecr_client, "api", "develop")

    assert [f["name"] for f in findings] == ["CVE-1"]


def test_api_error_raises_fetch_error(ecr_client, stubber):
    stubber.add_response(
        "describe_image_scan_findings",
        make_page([make_finding("CVE-1", "HIGH")], "tok1"),
        request_params(),
    )
    stubber.add_client_error(
        "describe_image_scan_findings",
        service_error_code="ScanNotFoundException",
        service_message="scan not found",
    )

    with pytest.raises(FetchError) as excinfo:
        fetch_all_findings(ecr_client, "api", "develop")

    assert excinfo.value.repository == "api"
    assert excinfo.value.image_tag == "develop"
    assert excinfo.value.__cause__ is not None
    assert not isinstance(excinfo.value, PaginationExhaustedError)


def test_transport_error_raises_fetch_error():
    class BrokenClient(object):
        def describe_image_scan_findings(self, **kwargs):
            raise EndpointConnectionError(endpoint_url="https://api.ecr.us-east-1.amazonaws.com")

    with pytest.raises(FetchError) as excinfo:
        fetch_all_findings(BrokenClient(), "api", "develop")

    assert isinstance(excinfo.value.__cause__, EndpointConnectionError)


def test_max_pages_bounds_pagination(ecr_client, stubber):
    stubber.add_response("describe_image_scan_findings", make_page([], "tok1"), request_params())
    stubber.add_response("describe_image_scan_findings", make_page([], "tok2"), request_params("tok1"))

    with pytest.raises(PaginationExhaustedError) as excinfo:
        fetch_all_findings(ecr_client, "api", "develop", max_pages=2)

    assert excinfo.value.pages == 2
    stubber.assert_no_pending_responses()


def test_deadline_bounds_pagination(ecr_client, stubber):
    stubber.add_response("describe_image_scan_findings", make_page([], "tok1"), request_params())

    with pytest.raises(PaginationExhaustedError):
        fetch_all_findings(ecr_client, "api", "develop", deadline=time.monotonic() - 1)


def test_get_ecr_client_uses_timeout():
    client = get_ecr_client("eu-west-1", timeout=7)

    assert client.meta.region_name == "eu-west-1"
    assert client.meta.config.read_timeout == 7
    assert client.meta.config.connect_timeout == 7
