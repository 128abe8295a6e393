class BlobStoreError(Exception):
    """Base class."""


class DatabaseError(BlobStoreError):
    pass


class BackendError(DatabaseError):
    """A transient backend failure that outlived the retry budget."""


class NotFoundError(BlobStoreError):
    pass


class ValidationError(BlobStoreError):
    pass


class DataTooLargeError(BlobStoreError):
    pass


class CannotEditFrozenFileError(BlobStoreError):
    pass


class InsertError(BlobStoreError):
    pass
