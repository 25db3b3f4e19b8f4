import json
import re

import pytest

from kokoro_g2p.g2p import G2P
from kokoro_g2p.lexicon import Lexicon

GOLD = {
    "A": "ˈA",
    "B": "bˈi",
    "C": "sˈi",
    "I": "ˈI",
    "N": "ˈɛn",
    "O": "ˈO",
    "hello": "həlˈO",
    "world": "wˈɜɹld",
    "can't": "kˈænt",
    "cat": "kˈæt",
    "apple": "ˈæpᵊl",
    "bus": "bˈʌs",
    "walk": "wˈɔk",
    "wait": "wˈAt",
    "need": "nˈid",
    "stop": "stˈɑp",
    "well": "wˈɛl",
    "known": "nˈOn",
    "peer": "pˈɪɹ",
    "to": "tˈu",
    "am": "ˈæm",
    "used": {"VBD": "jˈust", "DEFAULT": "jˈuzd"},
    "read": {"VBD": "ɹˈɛd", "VBN": "ɹˈɛd", "DEFAULT": "ɹˈid"},
    "percent": "pəɹsˈɛnt",
    "versus": "vˈɜɹsəs",
    "bc": "bək",
    "and": "ˈænd",
    "minus": "mˈInəs",
    "point": "pˈYnt",
    "zero": "zˈiɹO",
    "one": "wˈʌn",
    "two": "tˈu",
    "three": "θɹˈi",
    "four": "fˈɔɹ",
    "five": "fˈIv",
    "six": "sˈɪks",
    "seven": "sˈɛvən",
    "eight": "ˈAt",
    "nine": "nˈIn",
    "oh": "ˈO",
    "twenty": "twˈɛnti",
    "first": "fˈɜɹst",
    "hundred": "hˈʌndɹəd",
    "thousand": "θˈWzənd",
    "nineteen": "nˌInˈtin",
    "eighty": "ˈAti",
    "dollar": "dˈɑləɹ",
    "cent": "sˈɛnt",
    "pound": "pˈWnd",
    "pence": "pˈɛns",
}

SILVER = {
    "kokoro": "kˈOkəɹO",
    "blog": "blˈɑɡ",
}

TAGS = {
    "Hello": "UH",
    "hello": "UH",
    "can": "MD",
    "'": "POS",
    "t": "RB",
    "the": "DT",
    "The": "DT",
    "a": "DT",
    "I": "PRP",
    "used": "VBD",
    "to": "TO",
    "walk": "VB",
    "read": "VBD",
    "/": "SYM",
    "-": "HYPH",
    "$": "$",
    "£": "$",
    ",": ",",
    ":": ":",
    ".": ".",
    "!": ".",
    "?": ".",
}

TOKEN_REGEX = re.compile(r"[0-9]+(?:[.,][0-9]+)*|[^\W\d_]+|\S")


class FakeTagger:
    """Deterministic Penn-style tagger: splits punctuation and apostrophes off words."""

    def __init__(self, tags=None):
        self.tags = dict(TAGS, **(tags or {}))
        self.calls = []

    def tag(self, text):
        self.calls.append(text)
        return [(t, self.tags.get(t, 'CD' if t[0].isdigit() else 'NN')) for t in TOKEN_REGEX.findall(text)]


def write_vocab(path, prefix, gold=GOLD, silver=SILVER):
    path.mkdir(parents=True, exist_ok=True)
    (path / f'{prefix}_gold.json').write_text(json.dumps(gold, ensure_ascii=False), encoding='utf-8')
    (path / f'{prefix}_silver.json').write_text(json.dumps(silver, ensure_ascii=False), encoding='utf-8')
    return path


@pytest.fixture
def vocab_dir(tmp_path):
    path = write_vocab(tmp_path / 'lexicons', 'us')
    write_vocab(path, 'gb')
    return path


@pytest.fixture
def lexicon(vocab_dir):
    return Lexicon(vocab_dir=vocab_dir)


@pytest.fixture
def british_lexicon(vocab_dir):
    return Lexicon(british=True, vocab_dir=vocab_dir)


@pytest.fixture
def tagger():
    return FakeTagger()


@pytest.fixture
def g2p(lexicon, tagger):
    return G2P(lexicon=lexicon, tagger=tagger)
