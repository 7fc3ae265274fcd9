"""Exception taxonomy for the redaction pipeline.

Only input errors and publish errors ever reach the caller. Provider,
font and geometry problems are absorbed inside the pipeline.
"""


class RedactionError(Exception):
    """Base class for redaction errors."""

    pass


class DocumentInputError(RedactionError):
    """The uploaded payload cannot be processed.

    Examples: missing payload, invalid base64, not a PDF, zero pages.
    Raised before any AI or font request is issued.
    """

    pass


class PublishError(RedactionError):
    """The rendered document could not be persisted.

    Examples: storage upload rejected, queue insert rejected.
    """

    pass


class ProviderError(RedactionError):
    """A single AI provider attempt failed.

    The metadata extractor catches this and moves on to the next provider.
    """

    pass
