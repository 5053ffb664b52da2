"""Exceptions raised by the exporter."""


class ExporterError(Exception):
    pass


class ConfigError(ExporterError):
    """Invalid environment configuration, fatal at start-up."""


class FetchError(ExporterError):
    """The scan findings could not be read from ECR.

    The boto error that caused it is kept as ``__cause__``.
    """

    def __init__(self, message, repository=None, image_tag=None):
        super().__init__(message)
        self.repository = repository
        self.image_tag = image_tag


class PaginationExhaustedError(FetchError):
    """ECR kept returning a nextToken past the page or time limit."""

    def __init__(self, message, repository=None, image_tag=None, pages=0):
        super().__init__(message, repository=repository, image_tag=image_tag)
        self.pages = pages
