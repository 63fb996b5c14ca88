"""Exceptions raised by the MRU list and its collaborators."""


class MruError(Exception):
    """Base class for all MRU errors"""
    pass


class MruConfigurationError(MruError):
    """Raised when the list is used before its menu region is set up correctly"""
    pass


class StorageWriteError(MruError):
    """Raised when the settings backend fails to persist pending writes"""
    pass
