class StoreError(Exception):
    """A document store call failed (network, permission, missing document)."""


class VersionConflict(StoreError):
    """A conditional write lost against a concurrent writer."""


class UploadError(Exception):
    """The asset host rejected or failed an upload."""
