"""Error hierarchy for the Preservica client.

Error layers:
- PreservicaClientError: Base class for every error raised by this library
- ClientRequestError: The API (or the network in front of it) refused a request
- ResponseError: A response arrived but did not have the expected shape
- RequestValidationError: The caller asked for something the API cannot do

Cache read faults never surface; they are treated as misses by the cache itself.
"""


class PreservicaClientError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Transport errors
# =============================================================================


class ClientRequestError(PreservicaClientError):
    """Non-2xx response, or a transport fault before any response arrived."""

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int | None,
        body: str = "",
    ) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "unavailable"
        message = f"Status code {status} calling {url} with method {method}"
        if body:
            message = f"{message} {body}"
        super().__init__(message, code="request_failed")


# =============================================================================
# Response shape errors
# =============================================================================


class ResponseError(PreservicaClientError):
    """Base class for responses that cannot be mapped."""


class XmlShapeError(ResponseError):
    """A required element or attribute is missing from an XML response."""

    def __init__(self, message: str, fragment: str | None = None) -> None:
        self.fragment = fragment
        if fragment:
            message = f"{message}:\n{fragment}"
        super().__init__(message, code="xml_shape")


class ResponseFormatError(ResponseError):
    """A non-XML response (JSON, secret payload) had an unexpected shape."""


# =============================================================================
# Caller and environment errors
# =============================================================================


class RequestValidationError(PreservicaClientError):
    """The request arguments are not acceptable to the API."""


class ConfigurationError(PreservicaClientError):
    """Client misconfiguration detected."""


class SecretFormatError(ConfigurationError):
    """The secret does not contain usable credentials."""


class PaginationLimitError(PreservicaClientError):
    """A paginated listing kept returning next-page links past the page bound."""

    def __init__(self, first_url: str, max_pages: int) -> None:
        self.first_url = first_url
        self.max_pages = max_pages
        super().__init__(
            f"Stopped following {first_url} after {max_pages} pages",
            code="pagination_limit",
        )
