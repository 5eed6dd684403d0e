from __future__ import annotations


class DeepStorageError(Exception):
    """Base class for errors raised by the document adapter itself."""


class InvalidConfigurationError(DeepStorageError, ValueError):
    pass


class InvalidKeyError(DeepStorageError, ValueError):
    pass


class InvalidValueError(DeepStorageError, ValueError):
    """A value whose shape cannot be stored, e.g. a mapping key containing the delimiter."""


class IndexParseError(DeepStorageError, ValueError):
    """The flat-key index for a key is not a JSON list of strings."""


class DataCorruptionError(DeepStorageError):
    """
    Flattened entries do not reassemble under the expected root key.

    Usually means the key store was written out-of-band or by an
    incompatible writer.
    """


class NotSupportedError(DeepStorageError, NotImplementedError):
    pass
