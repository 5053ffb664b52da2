import time

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ecr_scan_exporter.modules.errors import FetchError, PaginationExhaustedError
from ecr_scan_exporter.modules.helper_functions import get_logger

logger = get_logger(__name__)

"""Create the ECR client with bounded timeouts"""
def get_ecr_client(region=None, timeout=60):
    config = Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"max_attempts": 3, "mode": "standard"},
    )
    session = boto3.session.Session(region_name=region)
    return session.client("ecr", config=config)

def fetch_all_findings(client, repository, image_tag, registry_id=None, max_pages=1000, deadline=None):
    """Return every scan finding of repository:image_tag.

    Follows nextToken until a page comes back without one. Any API error
    aborts the whole fetch with FetchError, nothing partial is returned.
    PaginationExhaustedError is raised when max_pages pages have been read,
    or the monotonic deadline has passed, and ECR still returns a token.
    """
    request = {
        "repositoryName": repository,
        "imageId": {"imageTag": image_tag},
    }
    if registry_id:
        request["registryId"] = registry_id

    findings = []
    pages = 0
    while True:
        try:
            response = client.describe_image_scan_findings(**request)
        except (ClientError, BotoCoreError) as e:
            logger.debug("failed to describe image scan findings of %s:%s: %s" % (repository, image_tag, e)) # DEBUG-LOG
            raise FetchError(
                "failed to describe image scan findings: %s" % e,
                repository=repository, image_tag=image_tag) from e
        pages += 1

        page = (response.get("imageScanFindings") or {}).get("findings") or []
        findings.extend(page)
        logger.debug("page %d: %d findings" % (pages, len(page))) # DEBUG-LOG

        # Pagination
        next_token = response.get("nextToken")
        if not next_token:
            return findings
        if pages >= max_pages:
            raise PaginationExhaustedError(
                "still paginating after %d pages" % pages,
                repository=repository, image_tag=image_tag, pages=pages)
        if deadline is not None and time.monotonic() >= deadline:
            raise PaginationExhaustedError(
                "still paginating after %d pages, time limit reached" % pages,
                repository=repository, image_tag=image_tag, pages=pages)
        request["nextToken"] = next_token
