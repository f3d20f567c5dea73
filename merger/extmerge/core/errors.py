"""
Error taxonomy for extmerge.

Fatal errors (ConfigurationError, InitializationError) propagate to the caller.
EnumerationError and FileExportError are raised and caught inside a run and
only ever surface as warnings.
"""


class MergeError(RuntimeError):
    pass


class ConfigurationError(MergeError, ValueError):
    """Invalid output/root path, extension outside the vocabulary, broken config file."""


class InitializationError(MergeError):
    """The output file could not be created or truncated."""


class EnumerationError(MergeError):
    def __init__(self, extension: str, cause: Exception):
        super().__init__(f"Enumeration failed for *.{extension}: {cause}")
        self.extension = extension
        self.cause = cause


class FileExportError(MergeError):
    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Could not export {path}: {cause}")
        self.path = path
        self.cause = cause
