from .torrent_search import TorrentSearchUseCase

__all__ = ["TorrentSearchUseCase"]
