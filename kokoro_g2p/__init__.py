"""
English grapheme-to-phoneme conversion for the Kokoro text-to-speech model.
"""
from .errors import G2PError, InvalidInputError, VocabLoadError
from .g2p import G2P, EspeakFallback, EspeakG2P, G2PResult, Language, make_g2p
from .lexicon import Lexicon
from .token import Token
from .vocab import PHONEME_TO_ID, batch_encode, encode

__all__ = [
    'G2P', 'G2PResult', 'Lexicon', 'Token',
    'EspeakFallback', 'EspeakG2P', 'Language', 'make_g2p',
    'PHONEME_TO_ID', 'encode', 'batch_encode',
    'G2PError', 'InvalidInputError', 'VocabLoadError',
]
