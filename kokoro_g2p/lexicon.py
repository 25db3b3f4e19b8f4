"""
Dictionary-based pronunciation lookup for English.

Two dictionaries are loaded per dialect: "gold" entries are authoritative
(rating 4), "silver" entries are a lower-confidence fallback (rating 3). A
dictionary value is either a phoneme string or a mapping from POS tag to
phonemes, with the sentinel keys "DEFAULT" and "None" (used when the sound
of the following word is unknown).

Words missing from both dictionaries are handled by closed-class special
cases, letter-by-letter spelling for proper nouns and acronyms, -s/-ed/-ing
stemming, and finally numeral expansion.
"""
import json
import logging
import os
import re
import unicodedata
from pathlib import Path
from typing import Dict, Optional, Tuple

from . import numerals
from .errors import VocabLoadError
from .segmenter import CURRENCIES
from .stress import PRIMARY_STRESS, SECONDARY_STRESS, US_TAUS, apply_stress

logger = logging.getLogger(__name__)

DEFAULT_VOCAB_DIR = './misaki_lexicons'

ADD_SYMBOLS = {'.': 'dot', '/': 'slash'}
SYMBOLS = {'%': 'percent', '&': 'and', '+': 'plus', '@': 'at'}

# Apostrophe, hyphen and ASCII letters
LEXICON_ORDS = frozenset([39, 45, *range(65, 91), *range(97, 123)])


def get_parent_tag(tag):
    """Map a Penn Treebank tag to its broad category (VERB, NOUN, ADV, ADJ)."""
    if tag is None:
        return tag
    elif tag.startswith('VB'):
        return 'VERB'
    elif tag.startswith('NN'):
        return 'NOUN'
    elif tag.startswith('ADV') or tag.startswith('RB'):
        return 'ADV'
    elif tag.startswith('ADJ') or tag.startswith('JJ'):
        return 'ADJ'
    return tag


class PhonemeEntry:
    """
    A dictionary value: either direct phonemes or phonemes keyed by POS tag.

    Attributes:
        direct (str/None): Phonemes used regardless of tag
        by_tag (dict/None): Tag (or "None"/"DEFAULT") to phonemes
    """
    __slots__ = ('direct', 'by_tag')

    def __init__(self, direct=None, by_tag=None):
        self.direct = direct
        self.by_tag = by_tag

    @classmethod
    def from_json(cls, value):
        if isinstance(value, str):
            return cls(direct=value)
        if isinstance(value, dict) and all(v is None or isinstance(v, str) for v in value.values()):
            return cls(by_tag=dict(value))
        raise ValueError(f"unexpected dictionary value {value!r}")

    def select(self, tag, ctx=None):
        """
        Pick the phonemes for a tag.

        Order: exact tag, then the "None" entry when the next word's sound is
        unknown, then the tag's broad category, then "DEFAULT".
        """
        if self.by_tag is None:
            return self.direct
        if tag in self.by_tag:
            return self.by_tag[tag]
        if ctx is not None and ctx.future_vowel is None and 'None' in self.by_tag:
            return self.by_tag['None']
        parent = get_parent_tag(tag)
        if parent in self.by_tag:
            return self.by_tag[parent]
        return self.by_tag.get('DEFAULT')

    def __repr__(self):
        return f"PhonemeEntry({self.direct if self.by_tag is None else self.by_tag!r})"


def grow_dictionary(d):
    """
    Add capitalized variants of lowercase keys and lowercase variants of
    capitalized keys. Existing entries always win.
    """
    e = {}
    for k, v in d.items():
        if len(k) < 2:
            continue
        if k == k.lower():
            if k != k.capitalize():
                e[k.capitalize()] = v
        elif k == k.lower().capitalize():
            e[k.lower()] = v
    return {**e, **d}


def load_dictionary(path: Path) -> Dict[str, PhonemeEntry]:
    """
    Load one JSON dictionary file.

    Raises:
        VocabLoadError: If the file is missing, unreadable or malformed
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise VocabLoadError(f"Vocabulary file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise VocabLoadError(f"Vocabulary file could not be parsed: {path}") from e
    if not isinstance(data, dict):
        raise VocabLoadError(f"Vocabulary file is not a JSON object: {path}")
    try:
        entries = {k: PhonemeEntry.from_json(v) for k, v in data.items()}
    except ValueError as e:
        raise VocabLoadError(f"Vocabulary file {path}: {e}") from e
    return grow_dictionary(entries)


def numeric_if_needed(c):
    """Replace a non-ASCII digit character with its ASCII digit."""
    if not c.isdigit():
        return c
    n = unicodedata.numeric(c, None)
    if n is None or n != int(n):
        return c
    return str(int(n))


class Lexicon:
    """
    English pronunciation dictionary.

    Args:
        british (bool): Load the British dictionaries and use British suffix rules
        vocab_dir (str/Path/None): Directory with us_gold.json, us_silver.json,
            gb_gold.json and gb_silver.json. Defaults to $KOKORO_G2P_VOCAB_DIR,
            then ./misaki_lexicons.

    Raises:
        VocabLoadError: If a dictionary cannot be loaded
    """
    def __init__(self, british=False, vocab_dir=None):
        self.british = british
        self.cap_stresses = (0.5, 2)
        if vocab_dir is None:
            vocab_dir = os.environ.get('KOKORO_G2P_VOCAB_DIR', DEFAULT_VOCAB_DIR)
        prefix = 'gb' if british else 'us'
        self.golds = load_dictionary(Path(vocab_dir) / f'{prefix}_gold.json')
        self.silvers = load_dictionary(Path(vocab_dir) / f'{prefix}_silver.json')
        logger.info("Loaded %s lexicon: %d gold, %d silver entries",
                    prefix, len(self.golds), len(self.silvers))

    def gold(self, word, tag=None):
        entry = self.golds.get(word)
        return None if entry is None else entry.select(tag)

    def get_NNP(self, word):
        """
        Spell a word letter by letter, stressing every letter.

        Returns:
            tuple: (phonemes, 3), or (None, None) if a letter is not in the gold dictionary
        """
        ps = [self.gold(c.upper()) for c in word if c.isalpha()]
        if not ps or None in ps:
            return None, None
        ps = apply_stress(''.join(ps), 0)
        return PRIMARY_STRESS.join(ps.split(SECONDARY_STRESS)), 3

    def get_special_case(self, word, tag, stress, ctx):
        """Handle symbols, abbreviations and closed-class words whose sound depends on context."""
        if tag == 'ADD' and word in ADD_SYMBOLS:
            return self.lookup(ADD_SYMBOLS[word], None, -0.5, ctx)
        elif word in SYMBOLS:
            return self.lookup(SYMBOLS[word], None, None, ctx)
        elif '.' in word.strip('.') and word.replace('.', '').isalpha() and len(max(word.split('.'), key=len)) < 3:
            return self.get_NNP(word)
        elif word in ('a', 'A'):
            return 'ɐ' if tag == 'DT' else 'ˈA', 4
        elif word in ('am', 'Am', 'AM'):
            if tag.startswith('NN'):
                return self.get_NNP(word)
            elif ctx.future_vowel is None or word != 'am' or (stress and stress > 0):
                return self.gold('am'), 4
            return 'ɐm', 4
        elif word in ('an', 'An', 'AN'):
            if word == 'AN' and tag.startswith('NN'):
                return self.get_NNP(word)
            return 'ɐn', 4
        elif word == 'I' and tag == 'PRP':
            return f'{SECONDARY_STRESS}I', 4
        elif word in ('by', 'By', 'BY') and get_parent_tag(tag) == 'ADV':
            return 'bˈI', 4
        elif word in ('to', 'To') or (word == 'TO' and tag in ('TO', 'IN')):
            return {None: self.gold('to'), False: 'tə', True: 'tʊ'}[ctx.future_vowel], 4
        elif word in ('in', 'In') or (word == 'IN' and tag != 'NNP'):
            stress = PRIMARY_STRESS if ctx.future_vowel is None or tag != 'IN' else ''
            return stress + 'ɪn', 4
        elif word in ('the', 'The') or (word == 'THE' and tag == 'DT'):
            return 'ði' if ctx.future_vowel is True else 'ðə', 4
        elif tag == 'IN' and re.match(r'(?i)vs\.?$', word):
            return self.lookup('versus', None, None, ctx)
        elif word in ('used', 'Used', 'USED'):
            if tag in ('VBD', 'JJ') and ctx.future_to:
                return self.gold('used', 'VBD'), 4
            return self.gold('used', 'DEFAULT'), 4
        return None, None

    def is_known(self, word, tag):
        if word in self.golds or word in SYMBOLS or word in self.silvers:
            return True
        elif not word.isalpha() or not all(ord(c) in LEXICON_ORDS for c in word):
            return False
        elif len(word) == 1:
            return True
        elif word == word.upper() and word.lower() in self.golds:
            return True
        return word[1:] == word[1:].upper()

    def lookup(self, word, tag, stress, ctx) -> Tuple[Optional[str], Optional[int]]:
        """
        Look a known word up in gold, then silver.

        An all-caps word missing from gold is searched in lowercase; tagged as
        a proper noun it skips silver and is spelled out unless its entry
        carries primary stress.

        Returns:
            tuple: (phonemes, rating), or (None, None) for unknown words
        """
        if not self.is_known(word, tag):
            return None, None
        is_NNP = None
        if word == word.upper() and word not in self.golds:
            word = word.lower()
            is_NNP = tag == 'NNP'
        entry, rating = self.golds.get(word), 4
        if entry is None and not is_NNP:
            entry, rating = self.silvers.get(word), 3
        ps = None if entry is None else entry.select(tag, ctx)
        if ps == '' or (is_NNP and (ps is None or PRIMARY_STRESS not in ps)):
            return self.get_NNP(word)
        if ps is None:
            return None, None
        return apply_stress(ps, stress), rating

    def _s(self, stem):
        # https://en.wiktionary.org/wiki/-s
        if not stem:
            return None
        elif stem[-1] in 'ptkfθ':
            return stem + 's'
        elif stem[-1] in 'szʃʒʧʤ':
            return stem + ('ɪ' if self.british else 'ᵻ') + 'z'
        return stem + 'z'

    def stem_s(self, word, tag, stress, ctx):
        if len(word) < 3 or not word.endswith('s'):
            return None, None
        if not word.endswith('ss') and self.is_known(word[:-1], tag):
            stem = word[:-1]
        elif (word.endswith("'s") or (len(word) > 4 and word.endswith('es') and not word.endswith('ies'))) and self.is_known(word[:-2], tag):
            stem = word[:-2]
        elif len(word) > 4 and word.endswith('ies') and self.is_known(word[:-3] + 'y', tag):
            stem = word[:-3] + 'y'
        else:
            return None, None
        stem, rating = self.lookup(stem, tag, stress, ctx)
        return self._s(stem), rating

    def _ed(self, stem):
        # https://en.wiktionary.org/wiki/-ed
        if not stem:
            return None
        elif stem[-1] in 'pkfθʃsʧ':
            return stem + 't'
        elif stem[-1] == 'd':
            return stem + ('ɪ' if self.british else 'ᵻ') + 'd'
        elif stem[-1] != 't':
            return stem + 'd'
        elif self.british or len(stem) < 2:
            return stem + 'ɪd'
        elif stem[-2] in US_TAUS:
            return stem[:-1] + 'ɾᵻd'
        return stem + 'ᵻd'

    def stem_ed(self, word, tag, stress, ctx):
        if len(word) < 4 or not word.endswith('d'):
            return None, None
        if not word.endswith('dd') and self.is_known(word[:-1], tag):
            stem = word[:-1]
        elif len(word) > 4 and word.endswith('ed') and not word.endswith('eed') and self.is_known(word[:-2], tag):
            stem = word[:-2]
        else:
            return None, None
        stem, rating = self.lookup(stem, tag, stress, ctx)
        return self._ed(stem), rating

    def _ing(self, stem):
        # https://en.wiktionary.org/wiki/-ing
        if not stem:
            return None
        elif self.british:
            if stem[-1] in 'əː':
                return None
        elif len(stem) > 1 and stem[-1] == 't' and stem[-2] in US_TAUS:
            return stem[:-1] + 'ɾɪŋ'
        return stem + 'ɪŋ'

    def stem_ing(self, word, tag, stress, ctx):
        if len(word) < 5 or not word.endswith('ing'):
            return None, None
        if len(word) > 5 and self.is_known(word[:-3], tag):
            stem = word[:-3]
        elif self.is_known(word[:-3] + 'e', tag):
            stem = word[:-3] + 'e'
        elif len(word) > 5 and re.search(r'([bcdgklmnprstvxz])\1ing$|cking$', word) and self.is_known(word[:-4], tag):
            stem = word[:-4]
        else:
            return None, None
        stem, rating = self.lookup(stem, tag, stress, ctx)
        return self._ing(stem), rating

    def get_word(self, word, tag, stress, ctx):
        ps, rating = self.get_special_case(word, tag, stress, ctx)
        if ps is not None:
            return ps, rating
        wl = word.lower()
        if len(word) > 1 and word.replace("'", '').isalpha() and word != word.lower() and (
            tag != 'NNP' or len(word) > 7
        ) and word not in self.golds and word not in self.silvers and (
            word == word.upper() or word[1:] == word[1:].lower()
        ) and (
            wl in self.golds or wl in self.silvers or any(
                fn(wl, tag, stress, ctx)[0] for fn in (self.stem_s, self.stem_ed, self.stem_ing)
            )
        ):
            word = wl
        if self.is_known(word, tag):
            return self.lookup(word, tag, stress, ctx)
        elif word.endswith("s'") and self.is_known(word[:-2] + "'s", tag):
            return self.lookup(word[:-2] + "'s", tag, stress, ctx)
        elif word.endswith("'") and self.is_known(word[:-1], tag):
            return self.lookup(word[:-1], tag, stress, ctx)
        _s, rating = self.stem_s(word, tag, stress, ctx)
        if _s is not None:
            return _s, rating
        _ed, rating = self.stem_ed(word, tag, stress, ctx)
        if _ed is not None:
            return _ed, rating
        _ing, rating = self.stem_ing(word, tag, 0.5 if stress is None else stress, ctx)
        if _ing is not None:
            return _ing, rating
        return None, None

    def append_currency(self, ps, currency):
        if not currency:
            return ps
        units = CURRENCIES.get(currency)
        unit = self.stem_s(units[0] + 's', None, None, None)[0] if units else None
        return f'{ps} {unit}' if unit else ps

    def __call__(self, tk, ctx):
        """
        Resolve one token.

        Args:
            tk (Token): Token to resolve; its alias is used in place of its text
            ctx (TokenContext): Look-ahead context

        Returns:
            tuple: (phonemes, rating), or (None, None) when unresolved
        """
        word = (tk.text if tk.alias is None else tk.alias).replace(chr(8216), "'").replace(chr(8217), "'")
        word = unicodedata.normalize('NFKC', word)
        word = ''.join(numeric_if_needed(c) for c in word)
        stress = None if word == word.lower() else self.cap_stresses[int(word == word.upper())]
        ps, rating = self.get_word(word, tk.tag, stress, ctx)
        if ps is not None:
            return apply_stress(self.append_currency(ps, tk.currency), tk.stress), rating
        elif numerals.is_number(word, tk.is_head):
            ps, rating = numerals.get_number(self, word, tk.currency, tk.is_head, tk.num_flags)
            return apply_stress(ps, tk.stress), rating
        return None, None
