"""
Numeral expansion: cardinals, ordinals, years, decimals and currency amounts.

Number words come from num2words; each word is then looked up in the
lexicon so the result is a phoneme string with normal dictionary stress.
"""
import logging
import re

from num2words import num2words

from .preprocess import is_digit
from .segmenter import CURRENCIES

logger = logging.getLogger(__name__)

ORDINALS = frozenset(['st', 'nd', 'rd', 'th'])
NUMBER_SUFFIXES = ('ing', "'d", 'ed', "'s", *ORDINALS, 's')


def cardinal(n):
    return num2words(n)


def ordinal(n):
    return num2words(n, to='ordinal')


def year(n):
    """Read a number as a year, e.g. 1984 -> "nineteen eighty-four"."""
    return num2words(n, to='year')


def is_number(word, is_head):
    """
    Check whether a word can be expanded as a numeral.

    Args:
        word (str): Token text
        is_head (bool): Whether the token starts a word (a leading minus is allowed)

    Returns:
        bool: True for digits with optional separators and a known suffix
    """
    if all(not is_digit(c) for c in word):
        return False
    for s in NUMBER_SUFFIXES:
        if word.endswith(s):
            word = word[:-len(s)]
            break
    return all(is_digit(c) or c in ',.' or (is_head and i == 0 and c == '-') for i, c in enumerate(word))


def is_currency(word):
    if '.' not in word:
        return True
    elif word.count('.') > 1:
        return False
    cents = word.split('.')[1]
    return len(cents) < 3 or set(cents) <= {'0'}


def get_number(lexicon, word, currency, is_head, num_flags):
    """
    Expand a numeral into phonemes.

    Args:
        lexicon (Lexicon): Used to look up each number word
        word (str): Numeral text, possibly with a suffix such as "st" or "s"
        currency (str/None): Pending currency symbol
        is_head (bool): False when the numeral is a piece of a larger word
        num_flags (str): Formatting flags; "&" keeps "and", "a" reads a
            leading "one" as "a", "n" attaches "and" to the previous word

    Returns:
        tuple: (phonemes, rating), or (None, None) when nothing could be read
    """
    suffix = re.search(r"[a-z']+$", word)
    suffix = suffix.group() if suffix else None
    word = word[:-len(suffix)] if suffix else word
    result = []
    if word.startswith('-'):
        result.append(lexicon.lookup('minus', None, None, None))
        word = word[1:]

    def extend_num(num, first=True, escape=False):
        splits = re.split(r'[^a-z]+', num if escape else cardinal(int(num)))
        for i, w in enumerate(splits):
            if not w:
                continue
            if w != 'and' or '&' in num_flags:
                if first and i == 0 and len(splits) > 1 and w == 'one' and 'a' in num_flags:
                    result.append(('ə', 4))
                else:
                    result.append(lexicon.lookup(w, None, -2 if w == 'point' else None, None))
            elif 'n' in num_flags and result and result[-1][0]:
                result[-1] = (result[-1][0] + 'ən', result[-1][1])

    def read_numeral(word):
        if is_digit(word) and suffix in ORDINALS:
            extend_num(ordinal(int(word)), escape=True)
        elif not result and len(word) == 4 and currency not in CURRENCIES and is_digit(word):
            extend_num(year(int(word)), escape=True)
        elif not is_head and '.' not in word:
            num = word.replace(',', '')
            if num[0] == '0' or len(num) > 3:
                for n in num:
                    extend_num(n, first=False)
            elif len(num) == 3 and not num.endswith('00'):
                extend_num(num[0])
                if num[1] == '0':
                    result.append(lexicon.lookup('O', None, -2, None))
                    extend_num(num[2], first=False)
                else:
                    extend_num(num[1:], first=False)
            else:
                extend_num(num)
        elif word.count('.') > 1 or not is_head:
            first = True
            for num in word.replace(',', '').split('.'):
                if not num:
                    pass
                elif num[0] == '0' or (len(num) != 2 and any(n != '0' for n in num[1:])):
                    for n in num:
                        extend_num(n, first=False)
                else:
                    extend_num(num, first=first)
                first = False
        elif currency in CURRENCIES and is_currency(word):
            pairs = [
                (int(num) if num else 0, unit)
                for num, unit in zip(word.replace(',', '').split('.'), CURRENCIES[currency])
            ]
            if len(pairs) > 1:
                if pairs[1][0] == 0:
                    pairs = pairs[:1]
                elif pairs[0][0] == 0:
                    pairs = pairs[1:]
            for i, (num, unit) in enumerate(pairs):
                if i > 0:
                    result.append(lexicon.lookup('and', None, None, None))
                extend_num(num, first=i == 0)
                if abs(num) != 1 and unit != 'pence':
                    result.append(lexicon.stem_s(unit + 's', None, None, None))
                else:
                    result.append(lexicon.lookup(unit, None, None, None))
        else:
            if is_digit(word):
                word = cardinal(int(word))
            elif '.' not in word:
                num = int(word.replace(',', ''))
                word = ordinal(num) if suffix in ORDINALS else cardinal(num)
            else:
                # Fraction digits are read one by one, exactly as written
                whole, _, fraction = word.replace(',', '').partition('.')
                words = [cardinal(int(whole))] if whole else []
                if fraction:
                    words.append('point')
                    words.extend(cardinal(int(n)) for n in fraction)
                word = ' '.join(words)
            extend_num(word, escape=True)

    start = len(result)
    try:
        read_numeral(word)
    except (OverflowError, ValueError):
        logger.warning("Numeral %r is too long for number words, reading digits", word)
        del result[start:]
        for n in word:
            if is_digit(n):
                extend_num(n, first=False)
            elif n == '.':
                result.append(lexicon.lookup('point', None, -2, None))

    result = [(ps, rating) for ps, rating in result if ps is not None]
    if not result:
        logger.warning("Could not expand numeral %r", word)
        return None, None
    ps, rating = ' '.join(ps for ps, _ in result), min(r for _, r in result)
    if suffix in ('s', "'s"):
        return lexicon._s(ps), rating
    elif suffix in ('ed', "'d"):
        return lexicon._ed(ps), rating
    elif suffix == 'ing':
        return lexicon._ing(ps), rating
    return ps, rating
