"""
Segmentation of tagged tokens into the words the resolver works on.

fold_left merges continuation tokens back into their predecessor, and
retokenize splits every unresolved token into letter/digit runs and single
symbols, then regroups pieces written without whitespace between them so the
resolver can try them as one compound (e.g. "$", "5", ".", "25").
"""
import logging
import re
from typing import List

from .token import Token, Word, merge_tokens

logger = logging.getLogger(__name__)

# Currency symbols and their word representations
CURRENCIES = {
    '$': ('dollar', 'cent'),
    '£': ('pound', 'pence'),
    '€': ('euro', 'cent'),
}

# Characters to ignore during tokenization and punctuation for special handling
SUBTOKEN_JUNKS = frozenset("',-._‘’/")
PUNCTS = frozenset(';:,.!?—…"“”')
NON_QUOTE_PUNCTS = frozenset(p for p in PUNCTS if p not in '"“”')

PUNCT_TAGS = frozenset(['.', ',', '-LRB-', '-RRB-', '``', '""', "''", ':', '$', '#', 'NFP'])
PUNCT_TAG_PHONEMES = {'-LRB-': '(', '-RRB-': ')', '``': '“', '""': '”', "''": '”'}

SUBTOKEN_REGEX = re.compile(r"\d+(?:[,.]\d+)*|[^\W\d_]+|\S")


def subtokenize(word):
    """
    Split a word into numerals, runs of letters and single other characters.

    Args:
        word (str): Token text

    Returns:
        list: Pieces in order; the word itself when nothing was found
    """
    return SUBTOKEN_REGEX.findall(word) or [word]


def is_ascii_alpha(text):
    return all(97 <= ord(c.lower()) <= 122 for c in text)


def fold_left(tokens: List[Token], unk: str) -> List[Token]:
    """
    Merge every non-head token into the token before it.

    Args:
        tokens (list): Tokens from tokenize
        unk (str): Placeholder for missing phonemes while merging

    Returns:
        list: Tokens where every element is a head
    """
    result = []
    for tk in tokens:
        if result and not tk.is_head:
            tk = merge_tokens([result.pop(), tk], unk=unk)
        result.append(tk)
    return result


def retokenize(tokens: List[Token]) -> List[Word]:
    """
    Split tokens into pieces and regroup them into resolvable words.

    Punctuation, dashes and currency symbols are resolved here directly, a
    pending currency symbol is handed to the numeral that follows it, and a
    "2" between letters (as in "peer2peer") is read as "to".

    Args:
        tokens (list): Tokens after fold_left

    Returns:
        list: Word objects, each a single token or a group of adjacent pieces
    """
    words = []
    last_is_group = False
    currency = None
    for i, token in enumerate(tokens):
        if token.alias is None and token.phonemes is None:
            tks = [
                token.copy(text=t, whitespace='', phonemes=None, rating=None, is_head=True,
                           alias=None, currency=None, prespace=False)
                for t in subtokenize(token.text)
            ]
        else:
            tks = [token]
        tks[-1].whitespace = token.whitespace
        for j, tk in enumerate(tks):
            if tk.alias is not None or tk.phonemes is not None:
                pass
            elif tk.text in CURRENCIES:
                currency = tk.text
                tk.phonemes = ''
                tk.rating = 4
            elif tk.tag == ':' and tk.text in ('-', '–'):
                tk.phonemes = '—'
                tk.rating = 3
            elif tk.tag in PUNCT_TAGS and not is_ascii_alpha(tk.text):
                tk.phonemes = PUNCT_TAG_PHONEMES.get(tk.tag, ''.join(c for c in tk.text if c in PUNCTS))
                tk.rating = 4
            elif currency is not None:
                if tk.tag != 'CD':
                    currency = None
                elif j + 1 == len(tks) and (i + 1 == len(tokens) or tokens[i + 1].tag != 'CD'):
                    tk.currency = currency
            elif 0 < j < len(tks) - 1 and tk.text == '2' and (tks[j - 1].text[-1] + tks[j + 1].text[0]).isalpha():
                tk.alias = 'to'

            if tk.alias is not None or tk.phonemes is not None:
                words.append(Word([tk]))
                last_is_group = False
            elif last_is_group and not words[-1].tokens[-1].whitespace:
                tk.is_head = False
                words[-1].tokens.append(tk)
            else:
                words.append(Word([tk]))
                last_is_group = not tk.whitespace
    logger.debug("Retokenized %d tokens into %d words", len(tokens), len(words))
    return words
