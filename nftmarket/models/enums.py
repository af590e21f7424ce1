from enum import Enum


class CreationStatus(str, Enum):
    ABORTED = "ABORTED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    MINTED = "MINTED"
    LISTED = "LISTED"


class GalleryState(str, Enum):
    NOT_LOADED = "not-loaded"
    LOADED = "loaded"
