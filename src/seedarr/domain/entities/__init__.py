from .torrent import (
    CandidateRecord,
    MediaKind,
    QualityTier,
    ResolvedMedia,
    ResultSet,
    SearchPolicy,
    SortDirection,
    SortKey,
)

__all__ = [
    "CandidateRecord",
    "MediaKind",
    "QualityTier",
    "ResolvedMedia",
    "ResultSet",
    "SearchPolicy",
    "SortDirection",
    "SortKey",
]
