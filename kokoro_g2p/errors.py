"""Custom exceptions for the G2P engine."""


class G2PError(Exception):
    """Base class for G2P errors"""
    pass


class VocabLoadError(G2PError):
    """A lexicon dictionary could not be found or parsed"""
    pass


class InvalidInputError(G2PError):
    """Unsupported language or unusable input"""
    pass
