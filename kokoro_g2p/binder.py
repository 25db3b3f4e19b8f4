"""
Turn tagger output into tokens and bind preprocessing features onto them.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .preprocess import Feature, FlagsFeature, PhonemeFeature, StressFeature
from .token import Token

logger = logging.getLogger(__name__)

APOSTROPHES = ("'", '‘', '’')
CONTRACTION_SUFFIXES = frozenset(['s', 't', 'd', 'm', 're', 've', 'll'])
# Contractions of "not" that split before the "n", e.g. can't -> ca + n't
NOT_CONTRACTIONS = frozenset([
    "can't", "won't", "shan't",
    "wouldn't", "couldn't", "shouldn't", "hadn't", "haven't", "hasn't",
    "wasn't", "weren't", "isn't", "aren't", "don't", "doesn't", "didn't",
])


def align(text: str, surfaces: Sequence[str]) -> Optional[List[int]]:
    """
    Find the start offset of every surface in text, in order.

    Returns:
        list/None: Offsets, or None when some surface cannot be found without
            skipping over non-whitespace characters
    """
    offsets = []
    pos = 0
    for surface in surfaces:
        i = text.find(surface, pos)
        if i < 0 or text[pos:i].strip():
            return None
        offsets.append(i)
        pos = i + len(surface)
    return offsets


def make_tokens(text: str, pairs: Sequence[Tuple[str, str]]) -> Tuple[List[Token], Optional[List[int]]]:
    """
    Create tokens from (surface, tag) pairs, inferring trailing whitespace.

    The whitespace between two tokens is read back from the text they were
    tagged from. When the surfaces do not line up with the text, every token but
    the last gets a single space.

    Returns:
        tuple: (list of Token objects, list of start offsets or None)
    """
    offsets = align(text, [surface for surface, _ in pairs])
    if offsets is None and pairs:
        logger.warning("Tagger output does not align with %r, assuming single spaces", text)
    tokens = []
    for i, (surface, tag) in enumerate(pairs):
        if i == len(pairs) - 1:
            whitespace = ''
        elif offsets is None:
            whitespace = ' '
        else:
            whitespace = text[offsets[i] + len(surface):offsets[i + 1]]
        tokens.append(Token(surface, tag, whitespace))
    return tokens, offsets


def feature_targets(text, words, tokens, offsets):
    """
    Map every preprocessed word index to the indices of the tokens it covers.

    Falls back to matching by index when offsets are unavailable.
    """
    word_offsets = align(text, words)
    if offsets is None or word_offsets is None:
        return {i: [i] for i in range(min(len(words), len(tokens)))}
    targets = {}
    for i, (start, word) in enumerate(zip(word_offsets, words)):
        end = start + len(word)
        targets[i] = [
            j for j, (tk_start, tk) in enumerate(zip(offsets, tokens))
            if tk_start < end and tk_start + len(tk.text) > start
        ]
    return targets


def bind_features(tokens: List[Token], targets: Dict[int, List[int]], features: Dict[int, Feature]) -> None:
    """
    Apply parsed features onto the tokens they cover.

    A phoneme override is given to the first covered token; the others become
    empty continuations that fold_left merges back into it.
    """
    for k, feature in features.items():
        for i, j in enumerate(targets.get(k, [])):
            token = tokens[j]
            if isinstance(feature, StressFeature):
                token.stress = feature.value
            elif isinstance(feature, PhonemeFeature):
                token.is_head = i == 0
                token.phonemes = feature.phonemes if i == 0 else ''
                token.rating = 5
            elif isinstance(feature, FlagsFeature):
                token.num_flags = feature.flags


def split_contraction(word: Token, suffix: Token) -> Optional[List[Token]]:
    """
    Resplit a WORD + APOSTROPHE + SUFFIX window into two tokens.

    Returns:
        list/None: The two new tokens, or None when the combination is not a
            recognised contraction
    """
    if suffix.text.lower() not in CONTRACTION_SUFFIXES:
        return None
    combined = word.text + "'" + suffix.text
    cut = len(word.text)
    if combined.lower() in NOT_CONTRACTIONS:
        cut -= 1
    elif suffix.text.lower() == 't':
        return None
    return [
        word.copy(text=combined[:cut], whitespace=''),
        suffix.copy(text=combined[cut:]),
    ]


def repair_contractions(tokens: List[Token]) -> List[Token]:
    """
    Merge tagger splits such as "can", "'", "t" into "ca", "n't".

    Args:
        tokens (list): Tokens in input order

    Returns:
        list: Tokens with recognised contractions resplit at the apostrophe
    """
    result = []
    i = 0
    while i < len(tokens):
        if (i + 2 < len(tokens) and tokens[i + 1].text in APOSTROPHES
                and not tokens[i].whitespace and not tokens[i + 1].whitespace):
            pair = split_contraction(tokens[i], tokens[i + 2])
            if pair is not None:
                result.extend(pair)
                i += 3
                continue
        result.append(tokens[i])
        i += 1
    return result


def tokenize(text: str, words: List[str], features: Dict[int, Feature], tagger) -> List[Token]:
    """
    Tag the cleaned text and bind preprocessing features onto the tokens.

    Args:
        text (str): Cleaned text from preprocess
        words (list): Surface tokens from preprocess
        features (dict): Features keyed by index into words
        tagger: Object with a tag(text) method

    Returns:
        list: Token objects with tags, whitespace and bound features
    """
    pairs = tagger.tag(text)
    logger.debug("Tagger returned %d tokens", len(pairs))
    tokens, offsets = make_tokens(text, pairs)
    if features:
        bind_features(tokens, feature_targets(text, words, tokens, offsets), features)
    return repair_contractions(tokens)
