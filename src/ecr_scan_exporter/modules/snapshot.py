from collections import namedtuple, OrderedDict

from ecr_scan_exporter.modules.helper_functions import get_logger, str_value

logger = get_logger(__name__)

FindingRecord = namedtuple("FindingRecord", [
    "name",
    "severity",
    "package_name",
    "package_version",
    "cvss2_vector",
    "cvss2_score",
])

LABEL_NAMES = ["name", "severity", "package_version", "package_name", "CVSS2_VECTOR", "CVSS2_SCORE"]

SEVERITIES = ["CRITICAL", "HIGH", "MEDIUM", "LOW", "INFORMATIONAL", "UNDEFINED"]

def build_record(finding):
    package_version = ""
    package_name = ""
    cvss2_vector = ""
    cvss2_score = ""

    for attr in finding.get("attributes") or []:
        key = attr.get("key")
        if key == "package_version":
            package_version = str_value(attr.get("value"))
        elif key == "package_name":
            package_name = str_value(attr.get("value"))
        elif key == "CVSS2_VECTOR":
            cvss2_vector = str_value(attr.get("value"))
        elif key == "CVSS2_SCORE":
            cvss2_score = str_value(attr.get("value"))

    return FindingRecord(
        name=str_value(finding.get("name")),
        severity=str_value(finding.get("severity")),
        package_name=package_name,
        package_version=package_version,
        cvss2_vector=cvss2_vector,
        cvss2_score=cvss2_score,
    )

def build_records(findings, verbose=False):
    """Flatten raw ECR findings, one FindingRecord per finding."""
    records = []
    for finding in findings:
        if verbose:
            logger.info("attributes: %s" % format(finding.get("attributes")))
        records.append(build_record(finding))
    return records

def build_labels(record):
    return {
        "name": record.name,
        "severity": record.severity,
        "package_version": record.package_version,
        "package_name": record.package_name,
        "CVSS2_VECTOR": record.cvss2_vector,
        "CVSS2_SCORE": record.cvss2_score,
    }

def build_label_values(records):
    """Ordered label value tuples, identical label sets collapsed."""
    label_values = OrderedDict()
    for record in records:
        labels = build_labels(record)
        label_values[tuple(labels[n] for n in LABEL_NAMES)] = None
    return tuple(label_values)

def count_by_severity(label_values):
    """Findings per severity, counted over build_label_values() output."""
    severity_index = LABEL_NAMES.index("severity")
    counts = OrderedDict((severity, 0) for severity in SEVERITIES)
    for values in label_values:
        severity = values[severity_index] or "UNDEFINED"
        counts[severity] = counts.get(severity, 0) + 1
    return counts
