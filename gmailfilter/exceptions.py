class GmailFilterError(Exception):
    """Base class for all gmailfilter exceptions."""
    pass

class ConfigurationError(GmailFilterError):
    """Raised when credentials or the Gmail service handle cannot be established."""
    pass

class ProviderNotConfiguredError(GmailFilterError):
    """Raised when an operation is attempted on a provider that failed to configure."""
    pass

class UnknownTypeError(GmailFilterError):
    """Raised when a resource or data source type name is not registered."""
    pass
