"""
Token data model shared by every stage of the English G2P pipeline.
"""
from typing import List, Optional


# Token class to represent processed text with phonetic and stress information
class Token:
    """
    Object representing a token with phonetic and stress information.

    Attributes:
        text (str): The original text
        tag (str): Part-of-speech tag assigned by the tagger
        whitespace (str): Whitespace following this token
        phonemes (str/None): Phonetic representation, None while unresolved
        rating (int/None): Confidence of the phonemes, 1 (fallback) to 5 (explicit override)
        is_head (bool): False when this token continues the previous one
        alias (str/None): Text substituted for lookup, e.g. "2" -> "to"
        stress (int/float/None): Stress level indicator
        currency (str/None): Pending currency symbol for a numeral
        num_flags (str): Number formatting directives
        prespace (bool): Whether a space must separate these phonemes from the previous ones
    """
    def __init__(self, text, tag, whitespace='', phonemes=None, rating=None, is_head=True,
                 alias=None, stress=None, currency=None, num_flags='', prespace=False):
        self.text = text
        self.tag = tag
        self.whitespace = whitespace
        self.phonemes = phonemes
        self.rating = rating
        self.is_head = is_head
        self.alias = alias
        self.stress = stress
        self.currency = currency
        self.num_flags = num_flags
        self.prespace = prespace

    def copy(self, **changes):
        """Return a new token with the given attributes replaced."""
        attrs = dict(vars(self))
        attrs.update(changes)
        return Token(**attrs)

    def __repr__(self):
        return (f"Token(text={self.text!r}, tag={self.tag!r}, whitespace={self.whitespace!r}, "
                f"phonemes={self.phonemes!r}, rating={self.rating!r})")


class TokenContext:
    """
    Look-ahead state threaded right-to-left through resolution.

    Attributes:
        future_vowel (bool/None): Whether the next phoneme-bearing token starts
            with a vowel; None when unknown (e.g. after punctuation)
        future_to (bool): Whether the next token is a form of "to"
    """
    def __init__(self, future_vowel=None, future_to=False):
        self.future_vowel = future_vowel
        self.future_to = future_to

    def __repr__(self):
        return f"TokenContext(future_vowel={self.future_vowel!r}, future_to={self.future_to!r})"


class Word:
    """
    The unit the resolver iterates over: either a single token, or a group of
    tokens written with no whitespace between them that may resolve jointly.
    """
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens

    @property
    def is_group(self) -> bool:
        return len(self.tokens) > 1

    @property
    def token(self) -> Token:
        return self.tokens[0]

    def __repr__(self):
        return f"Word({[tk.text for tk in self.tokens]!r})"


def uppercase_weight(text):
    return sum(1 if c == c.lower() else 2 for c in text)


def merge_tokens(tokens: List[Token], unk: Optional[str] = None) -> Token:
    """
    Merge multiple tokens into a single new token.

    Args:
        tokens (list): List of Token objects to merge
        unk (str/None): Placeholder for members without phonemes. When None the
            merged token carries no phonemes at all (used for lookups).

    Returns:
        Token: A single merged Token object
    """
    stress = {tk.stress for tk in tokens if tk.stress is not None}
    currency = {tk.currency for tk in tokens if tk.currency is not None}
    rating = {tk.rating for tk in tokens}
    phonemes = None
    if unk is not None:
        phonemes = ''
        for tk in tokens:
            # Add a space when this token must be separated from what came before
            if tk.prespace and phonemes and not phonemes[-1].isspace() and tk.phonemes:
                phonemes += ' '
            phonemes += unk if tk.phonemes is None else tk.phonemes
    return Token(
        text=''.join(tk.text + tk.whitespace for tk in tokens[:-1]) + tokens[-1].text,
        tag=max(tokens, key=lambda tk: uppercase_weight(tk.text)).tag,
        whitespace=tokens[-1].whitespace,
        phonemes=phonemes,
        rating=None if None in rating else min(rating),
        is_head=tokens[0].is_head,
        alias=None,
        stress=list(stress)[0] if len(stress) == 1 else None,
        currency=max(currency) if currency else None,
        num_flags=''.join(sorted({c for tk in tokens for c in tk.num_flags})),
        prespace=tokens[0].prespace,
    )
