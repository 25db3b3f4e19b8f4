"""
Extraction of inline pronunciation overrides.

Overrides use markdown link syntax, ``[SURFACE](PAYLOAD)``:
    [Kokoro](/kˈOkəɹO/)   explicit phonemes
    [read](-1)            stress level (integer, or 0.5 / +0.5 / -0.5)
    [1990](#a#)           numeral formatting flags
Anything else in the payload is ignored.
"""
import re
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

LINK_REGEX = re.compile(r"\[([^\]]+)\]\(([^\)]*)\)")


class StressFeature(NamedTuple):
    value: float


class PhonemeFeature(NamedTuple):
    phonemes: str


class FlagsFeature(NamedTuple):
    flags: str


Feature = Union[StressFeature, PhonemeFeature, FlagsFeature]


def is_digit(text):
    return bool(re.fullmatch(r'[0-9]+', text))


def parse_feature(payload: str) -> Optional[Feature]:
    """
    Parse the payload of an override link.

    Args:
        payload (str): Text between the parentheses

    Returns:
        Feature/None: The parsed feature, or None for malformed payloads
    """
    if is_digit(payload[1 if payload[:1] in ('-', '+') else 0:]):
        return StressFeature(int(payload))
    elif payload in ('0.5', '+0.5'):
        return StressFeature(0.5)
    elif payload == '-0.5':
        return StressFeature(-0.5)
    elif len(payload) > 1 and payload[0] == '/' and payload[-1] == '/':
        return PhonemeFeature(payload[1:].rstrip('/'))
    elif len(payload) > 1 and payload[0] == '#' and payload[-1] == '#':
        return FlagsFeature(payload[1:].rstrip('#'))
    return None


def preprocess(text: str) -> Tuple[str, List[str], Dict[int, Feature]]:
    """
    Strip override links from the text.

    Args:
        text (str): Raw input text

    Returns:
        tuple: (
            str: Cleaned text with every link replaced by its surface,
            list: Whitespace-separated surface tokens,
            dict: Parsed features keyed by token index
        )
    """
    result = ''
    tokens = []
    features = {}
    last_end = 0
    text = text.strip()
    for m in LINK_REGEX.finditer(text):
        result += text[last_end:m.start()]
        tokens.extend(text[last_end:m.start()].split())
        feature = parse_feature(m.group(2))
        if feature is not None:
            features[len(tokens)] = feature
        result += m.group(1)
        tokens.append(m.group(1))
        last_end = m.end()
    if last_end < len(text):
        result += text[last_end:]
        tokens.extend(text[last_end:].split())
    return result, tokens, features
