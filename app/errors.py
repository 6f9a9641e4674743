class CVParseError(Exception):
    """Base error for the CV parsing flow. Routers turn it into a failure envelope."""

    status_code = 400


class AuthorizationError(CVParseError):
    status_code = 401


class StorageDownloadError(CVParseError):
    pass


class ProviderNotConfiguredError(CVParseError):
    pass


class AIExtractionError(CVParseError):
    pass
