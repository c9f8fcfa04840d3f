from .source_fetcher import SourceFetcherPort
from .tmdb import TitleResolverPort

__all__ = [
    "SourceFetcherPort",
    "TitleResolverPort",
]
