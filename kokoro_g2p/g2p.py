"""
English grapheme-to-phoneme engine for Kokoro.

The main steps in the process are:
1. Preprocessing - strip [surface](payload) overrides into features
2. Tagging - split the text into POS-tagged tokens and bind the features
3. Segmentation - fold continuation tokens, split and regroup pieces
4. Resolution - look every word up right to left with look-ahead context
5. Assembly - join phonemes with the original whitespace

Non-English languages are passed straight to espeak through EspeakG2P.
"""
import enum
import logging
import re
import unicodedata
from typing import List, NamedTuple

from phonemizer.backend import EspeakBackend

from .binder import tokenize
from .errors import InvalidInputError
from .lexicon import Lexicon
from .preprocess import preprocess
from .resolver import resolve
from .segmenter import fold_left, retokenize
from .tagger import SpacyTagger
from .token import Token, merge_tokens

logger = logging.getLogger(__name__)


class G2PResult(NamedTuple):
    phonemes: str
    tokens: List[Token]


class G2P:
    """
    Convert English text into Kokoro phonemes.

    Args:
        british (bool): Use British English dictionaries and suffix rules
        vocab_dir (str/Path/None): Directory with the JSON dictionaries
        tagger: Object with tag(text) -> [(surface, tag)]; defaults to a spaCy tagger
        fallback (callable/None): Token -> (phonemes, rating) for unresolved words,
            e.g. EspeakFallback
        unk (str): Placeholder rendered for words without phonemes
        lexicon (Lexicon/None): Pre-built lexicon, shared instead of loading one;
            its own british setting then takes precedence

    Raises:
        VocabLoadError: If the dictionaries cannot be loaded
    """
    def __init__(self, british=False, vocab_dir=None, tagger=None, fallback=None, unk='❓', lexicon=None):
        self.lexicon = lexicon if lexicon is not None else Lexicon(british=british, vocab_dir=vocab_dir)
        self.british = self.lexicon.british
        self.tagger = tagger if tagger is not None else SpacyTagger()
        self.fallback = fallback
        self.unk = unk

    def convert(self, text: str) -> G2PResult:
        """
        Convert text to phonemes.

        Args:
            text (str): Input text, optionally with [surface](payload) overrides

        Returns:
            G2PResult: (phoneme string, list of final Token objects)
        """
        text, words, features = preprocess(text)
        logger.debug("Preprocessed %r: %d tokens, features at %s", text, len(words), sorted(features))
        tokens = tokenize(text, words, features, self.tagger)
        tokens = fold_left(tokens, self.unk)
        words = retokenize(tokens)
        resolve(words, self.lexicon, self.fallback)
        tokens = [merge_tokens(w.tokens, unk=self.unk) if w.is_group else w.token for w in words]
        result = ''.join((self.unk if tk.phonemes is None else tk.phonemes) + tk.whitespace for tk in tokens)
        logger.debug("Result phonemes %r", result)
        return G2PResult(result, tokens)

    def __call__(self, text: str) -> G2PResult:
        return self.convert(text)


# espeak IPA to Kokoro phonemes, longest match first
E2M = sorted({
    'ʔˌn\u0329': 'tᵊn', 'ʔn\u0329': 'tᵊn', 'ʔn': 'tᵊn', 'ʔ': 't',
    'a^ɪ': 'I', 'a^ʊ': 'W',
    'd^ʒ': 'ʤ',
    'e': 'A', 'e^ɪ': 'A',
    'r': 'ɹ',
    't^ʃ': 'ʧ',
    'x': 'k', 'ç': 'k',
    'ɐ': 'ə',
    'ɔ^ɪ': 'Y',
    'ə^l': 'ᵊl',
    'ɚ': 'əɹ',
    'ɬ': 'l',
    'ʲ': '', 'ʲO': 'jO', 'ʲQ': 'jQ',
}.items(), key=lambda kv: -len(kv[0]))


class EspeakFallback:
    """
    Out-of-vocabulary fallback that asks espeak for English IPA.

    Results are rated 1, the lowest confidence.
    """
    def __init__(self, british=False):
        self.british = british
        self.backend = EspeakBackend(
            language='en-gb' if british else 'en-us',
            preserve_punctuation=True, with_stress=True, tie='^',
        )

    def __call__(self, token):
        ps = self.backend.phonemize([token.text])
        if not ps or not ps[0].strip():
            return None, None
        ps = ps[0].strip()
        for old, new in E2M:
            ps = ps.replace(old, new)
        ps = re.sub(r'(\S)\u0329', r'ᵊ\1', ps).replace('\u0329', '')
        if self.british:
            ps = ps.replace('e^ə', 'ɛː').replace('iə', 'ɪə').replace('ə^ʊ', 'Q')
        else:
            ps = ps.replace('o^ʊ', 'O').replace('ɜːɹ', 'ɜɹ').replace('ɜː', 'ɜɹ').replace('ɪə', 'iə').replace('ː', '')
        ps = ps.replace('o', 'ɔ')
        return ps.replace('^', ''), 1


class EspeakG2P:
    """
    Phonemizer for non-English languages, delegated entirely to espeak.

    Args:
        language (str): espeak voice, e.g. "fr-fr" or "pt-br"
    """
    E2M = sorted({
        'a^ɪ': 'I', 'a^ʊ': 'W',
        'd^z': 'ʣ', 'd^ʒ': 'ʤ',
        'e^ɪ': 'A',
        'o^ʊ': 'O', 'ə^ʊ': 'Q',
        's^s': 'S',
        't^s': 'ʦ', 't^ʃ': 'ʧ',
        'ɔ^ɪ': 'Y',
    }.items(), key=lambda kv: -len(kv[0]))

    def __init__(self, language):
        self.language = language
        self.backend = EspeakBackend(
            language=language, preserve_punctuation=True, with_stress=True,
            tie='^', language_switch='remove-flags',
        )

    def convert(self, text: str) -> G2PResult:
        # Angle quotes carry parentheses through espeak
        text = text.replace('«', chr(8220)).replace('»', chr(8221))
        text = text.replace('(', '«').replace(')', '»')
        ps = self.backend.phonemize([text])
        if not ps:
            raise InvalidInputError(f"espeak returned no phonemes for language '{self.language}'")
        ps = ps[0].strip()
        for old, new in self.E2M:
            ps = ps.replace(old, new)
        ps = unicodedata.normalize('NFD', ps)
        ps = ps.replace('^', '').replace('-', '').replace(chr(8216), '').replace(chr(8217), '')
        ps = ps.replace('«', '(').replace('»', ')')
        return G2PResult(ps, [])

    def __call__(self, text: str) -> G2PResult:
        return self.convert(text)


class Language(enum.Enum):
    en_us = 'en-us'
    en_gb = 'en-gb'
    fr = 'fr'
    hi = 'hi'
    ja = 'ja'
    zh = 'zh'
    es = 'es'
    it = 'it'
    pt = 'pt'


ESPEAK_VOICES = {
    Language.fr: 'fr-fr',
    Language.hi: 'hi',
    Language.es: 'es',
    Language.it: 'it',
    Language.pt: 'pt-br',
}


def make_g2p(language, **kwargs):
    """
    Create the phonemizer for a language.

    Args:
        language (Language/str): Language or its code, e.g. "en-us" or "fr"
        **kwargs: Passed to G2P for English

    Returns:
        G2P/EspeakG2P: Object converting text with convert(text)

    Raises:
        InvalidInputError: If the language is unknown or not supported
    """
    try:
        lang = language if isinstance(language, Language) else Language(language)
    except ValueError as e:
        raise InvalidInputError(f"Unsupported language: {language}") from e
    if lang in (Language.en_us, Language.en_gb):
        return G2P(british=lang is Language.en_gb, **kwargs)
    elif lang in ESPEAK_VOICES:
        return EspeakG2P(ESPEAK_VOICES[lang])
    raise InvalidInputError(f"Unsupported language: {lang.value}")
