"""Exception types shared across EchoBot modules."""


class EchoBotError(Exception):
    """Base class for all EchoBot errors."""


class HistoryDecodeError(EchoBotError):
    """Stored conversation history could not be decoded."""


class BackupError(EchoBotError):
    """The remote document store rejected or failed a request."""


class ConfigFetchError(EchoBotError):
    """Remote configuration could not be fetched."""


class EntitlementError(EchoBotError):
    """Subscription records could not be retrieved."""
