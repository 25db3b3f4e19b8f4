from kokoro_g2p.resolver import resolve, resolve_group, resolve_tokens, token_context
from kokoro_g2p.segmenter import retokenize
from kokoro_g2p.token import Token, TokenContext, Word


def test_context_from_phonemes():
    ctx = TokenContext()
    assert token_context(ctx, 'ˈæpᵊl', Token('apple', 'NN')).future_vowel is True
    assert token_context(ctx, 'kˈæt', Token('cat', 'NN')).future_vowel is False
    assert token_context(TokenContext(future_vowel=True), ',', Token(',', ',')).future_vowel is None
    # Nothing classifiable keeps the previous state
    assert token_context(TokenContext(future_vowel=True), '', Token('$', '$')).future_vowel is True
    assert token_context(ctx, 'tˈu', Token('to', 'TO')).future_to
    assert token_context(ctx, 'tˈu', Token('TO', 'TO')).future_to
    assert not token_context(ctx, 'tˈu', Token('TO', 'NNP')).future_to


def test_single_letter_demotes_second_member():
    tokens = [Token('a', 'DT', phonemes='ˈA'), Token('bus', 'NN', phonemes='bˈʌs')]
    resolve_tokens(tokens)
    assert [tk.phonemes for tk in tokens] == ['ˈA', 'bˌʌs']


def test_lighter_half_of_stressed_compound_is_demoted():
    tokens = [
        Token('well', 'RB', phonemes='wˈɛl'),
        Token('known', 'VBN', phonemes='nˈOn'),
        Token('cat', 'NN', phonemes='kˈæt'),
    ]
    resolve_tokens(tokens)
    assert [tk.phonemes for tk in tokens] == ['wˌɛl', 'nˈOn', 'kˈæt']


def test_mixed_letters_and_digits_are_spaced():
    tokens = [Token('mp', 'NN', phonemes='ˌɛmpˈi'), Token('3', 'CD', phonemes='θɹˈi'), Token('.', '.')]
    resolve_tokens(tokens)
    assert tokens[1].prespace
    assert tokens[2].phonemes == '.'
    assert tokens[1].phonemes == 'θɹˈi'


def test_group_resolves_as_one_word(lexicon):
    words = retokenize([Token('ca', 'MD'), Token("n't", 'RB')])
    resolve(words, lexicon)
    assert [tk.phonemes for tk in words[0].tokens] == ['kˈænt', '', '', '']
    assert all(tk.rating == 4 for tk in words[0].tokens)


def test_group_resolves_right_to_left(lexicon):
    tokens = [Token('well', 'RB'), Token('-', 'HYPH'), Token('known', 'VBN')]
    ctx = resolve_group(tokens, lexicon, TokenContext())
    assert [tk.phonemes for tk in tokens] == ['wˌɛl', '', 'nˈOn']
    assert ctx.future_vowel is False


def test_unresolvable_group_is_left_without_phonemes(lexicon):
    # Known limitation: a single unknown piece leaves the whole group
    # unresolved, including the pieces the lexicon knows.
    tokens = [Token('cat', 'NN'), Token('/', 'SYM'), Token('zzq', 'NN')]
    resolve_group(tokens, lexicon, TokenContext())
    assert [tk.phonemes for tk in tokens] == [None, '', '']
    assert [tk.rating for tk in tokens] == [1, 1, 1]


def test_unresolvable_group_goes_to_fallback(lexicon):
    seen = []

    def fallback(tk):
        seen.append(tk.text)
        return 'kˈætzˈɪk', 1

    tokens = [Token('cat', 'NN'), Token('/', 'SYM'), Token('zzq', 'NN')]
    resolve_group(tokens, lexicon, TokenContext(), fallback)
    assert seen == ['cat/zzq']
    assert [tk.phonemes for tk in tokens] == ['kˈætzˈɪk', '', '']


def test_standalone_fallback(lexicon):
    words = [Word([Token('zzq', 'NN', ' ')]), Word([Token('cat', 'NN')])]
    resolve(words, lexicon, fallback=lambda tk: ('zˈɪk', 1))
    assert [(w.token.phonemes, w.token.rating) for w in words] == [('zˈɪk', 1), ('kˈæt', 4)]


def test_context_flows_backwards(lexicon):
    words = [Word([Token('the', 'DT', ' ')]), Word([Token('apple', 'NN', ' ')]),
             Word([Token('the', 'DT', ' ')]), Word([Token('cat', 'NN')])]
    resolve(words, lexicon)
    assert [w.token.phonemes for w in words] == ['ði', 'ˈæpᵊl', 'ðə', 'kˈæt']
