from .errors import (
    NNTPCapabilitiesNotPopulated,
    NNTPCapabilityError,
    NNTPCapabilityNotFound,
    NNTPDataError,
    NNTPError,
    NNTPPermanentError,
    NNTPProtocolError,
    NNTPReplyError,
    NNTPSyncError,
    NNTPTemporaryError,
    NNTPTLSActiveError,
    NNTPTransportError,
)
from .session import Session, connect, dial
from .types import Article, Group, PostingStatus, SSLMode

__all__ = [
    "Article",
    "Group",
    "NNTPCapabilitiesNotPopulated",
    "NNTPCapabilityError",
    "NNTPCapabilityNotFound",
    "NNTPDataError",
    "NNTPError",
    "NNTPPermanentError",
    "NNTPProtocolError",
    "NNTPReplyError",
    "NNTPSyncError",
    "NNTPTLSActiveError",
    "NNTPTemporaryError",
    "NNTPTransportError",
    "PostingStatus",
    "SSLMode",
    "Session",
    "connect",
    "dial",
]
