"""
Right-to-left resolution of words into phonemes.

Words are resolved from the end of the sentence backwards so that every
lookup knows how the following word starts (vowel, consonant or a pause) and
whether it is "to", which decides e.g. "the" (ði/ðə) and "used" (jˈust/jˈuzd).
"""
import logging
from typing import Callable, List, Optional, Tuple

from .preprocess import is_digit
from .segmenter import NON_QUOTE_PUNCTS, SUBTOKEN_JUNKS
from .stress import CONSONANTS, PRIMARY_STRESS, VOWELS, apply_stress, stress_weight
from .token import Token, TokenContext, Word, merge_tokens

logger = logging.getLogger(__name__)

Fallback = Callable[[Token], Tuple[Optional[str], Optional[int]]]


def token_context(ctx, ps, token):
    """
    Compute the context seen by the word before this one.

    Args:
        ctx (TokenContext): Context seen by this word
        ps (str/None): Phonemes this word resolved to
        token (Token): The word's token

    Returns:
        TokenContext: New context
    """
    vowel = ctx.future_vowel
    if ps:
        vowel = next((
            None if c in NON_QUOTE_PUNCTS else c in VOWELS
            for c in ps if c in VOWELS or c in CONSONANTS or c in NON_QUOTE_PUNCTS
        ), vowel)
    future_to = token.text in ('to', 'To') or (token.text == 'TO' and token.tag in ('TO', 'IN'))
    return TokenContext(future_vowel=vowel, future_to=future_to)


def resolve_tokens(tokens: List[Token]) -> None:
    """
    Finish a resolved group in place.

    Fills leftover punctuation and junk pieces, marks where a space is needed
    between members written together (mixed letters and digits, slashes),
    and demotes stress so a compound does not carry a primary stress on every
    part.
    """
    text = ''.join(tk.text + tk.whitespace for tk in tokens[:-1]) + tokens[-1].text
    prespace = ' ' in text or '/' in text or len({
        0 if c.isalpha() else (1 if is_digit(c) else 2)
        for c in text if c not in SUBTOKEN_JUNKS
    }) > 1
    for i, tk in enumerate(tokens):
        if tk.phonemes is None:
            if i == len(tokens) - 1 and tk.text in NON_QUOTE_PUNCTS:
                tk.phonemes = tk.text
                tk.rating = 3
            elif all(c in SUBTOKEN_JUNKS for c in tk.text):
                tk.phonemes = ''
                tk.rating = 3
        elif i > 0:
            tk.prespace = prespace
    if prespace:
        return
    indices = [i for i, tk in enumerate(tokens) if tk.phonemes]
    if len(indices) == 2 and len(tokens[indices[0]].text) == 1:
        tk = tokens[indices[1]]
        tk.phonemes = apply_stress(tk.phonemes, -0.5)
        return
    elif len(indices) < 2 or sum(PRIMARY_STRESS in tokens[i].phonemes for i in indices) <= (len(indices) + 1) // 2:
        return
    indices.sort(key=lambda i: (stress_weight(tokens[i].phonemes), i))
    for i in indices[:len(indices) // 2]:
        tokens[i].phonemes = apply_stress(tokens[i].phonemes, -0.5)


def resolve_group(tokens: List[Token], lexicon, ctx: TokenContext, fallback: Optional[Fallback] = None) -> TokenContext:
    """
    Resolve a group of pieces written without whitespace between them.

    The widest window ending at the right edge that the lexicon knows is
    resolved first; its first piece gets the phonemes and the rest become
    empty. The search then continues on the pieces left of the window. A
    piece that resolves in no window makes the whole group unresolvable: it
    is handed to the fallback as one token when one is configured, otherwise
    the group is left without phonemes.

    Returns:
        TokenContext: Context for the word before the group
    """
    left, right = 0, len(tokens)
    unresolved = False
    while left < right:
        if any(tk.alias is not None or tk.phonemes is not None for tk in tokens[left:right]):
            tk = None
        else:
            tk = merge_tokens(tokens[left:right])
        ps, rating = (None, None) if tk is None else lexicon(tk, ctx)
        if ps is not None:
            tokens[left].phonemes = ps
            tokens[left].rating = rating
            for x in tokens[left + 1:right]:
                x.phonemes = ''
                x.rating = rating
            ctx = token_context(ctx, ps, tk)
            right = left
            left = 0
        elif left + 1 < right:
            left += 1
        else:
            right -= 1
            tk = tokens[right]
            if tk.phonemes is None:
                if all(c in SUBTOKEN_JUNKS for c in tk.text):
                    tk.phonemes = ''
                    tk.rating = 3
                else:
                    unresolved = True
                    break
            left = 0
    if not unresolved:
        resolve_tokens(tokens)
        return ctx
    merged = merge_tokens(tokens)
    ps, rating = fallback(merged) if fallback is not None else (None, 1)
    logger.debug("Group %r left to %s", merged.text, 'fallback' if fallback is not None else 'unknown marker')
    tokens[0].phonemes, tokens[0].rating = ps, rating
    for tk in tokens[1:]:
        tk.phonemes = ''
        tk.rating = rating
    return token_context(ctx, ps, merged)


def resolve(words: List[Word], lexicon, fallback: Optional[Fallback] = None) -> None:
    """
    Resolve every word in place, last word first.

    Args:
        words (list): Word objects from retokenize
        lexicon (Lexicon): Callable (token, ctx) -> (phonemes, rating)
        fallback (callable/None): Token -> (phonemes, rating) for words the
            lexicon cannot resolve
    """
    ctx = TokenContext()
    for w in reversed(words):
        if w.is_group:
            ctx = resolve_group(w.tokens, lexicon, ctx, fallback)
            continue
        tk = w.token
        if tk.phonemes is None:
            tk.phonemes, tk.rating = lexicon(tk, ctx)
        if tk.phonemes is None and fallback is not None:
            tk.phonemes, tk.rating = fallback(tk)
        ctx = token_context(ctx, tk.phonemes, tk)
