import logging
import re

import pytest
from conftest import FakeTagger

from kokoro_g2p import g2p as g2p_module
from kokoro_g2p.errors import InvalidInputError
from kokoro_g2p.g2p import EspeakFallback, EspeakG2P, G2P, Language, make_g2p
from kokoro_g2p.token import Token


class FakeBackend:
    outputs = []

    def __init__(self, language, **kwargs):
        self.language = language
        self.kwargs = kwargs
        self.seen = []

    def phonemize(self, texts):
        self.seen.extend(texts)
        return list(self.outputs)


@pytest.fixture
def fake_espeak(monkeypatch):
    monkeypatch.setattr(g2p_module, 'EspeakBackend', FakeBackend)
    return FakeBackend


def test_hello_world(g2p):
    ps, tokens = g2p("Hello, world!")
    assert ps == "həlˈO, wˈɜɹld!"
    assert not re.search(r'[0-9]', ps)
    assert '❓' not in ps
    assert [tk.text for tk in tokens] == ["Hello", ",", "world", "!"]


def test_contraction_matches_dictionary_entry(g2p, lexicon):
    ps, tokens = g2p("can't")
    expected, _ = lexicon.lookup("can't", 'MD', None, None)
    assert ps == expected
    assert ''.join(tk.text for tk in tokens) == "can't"


def test_article_before_vowel(g2p):
    assert g2p("the apple").phonemes == "ði ˈæpᵊl"
    assert g2p("the cat").phonemes == "ðə kˈæt"


def test_used_to(g2p):
    assert g2p("I used to walk.").phonemes == "ˌI jˈust tə wˈɔk."


def test_currency(g2p):
    assert g2p("$5.25").phonemes == "fˈIv dˈɑləɹz ˈænd twˈɛnti fˈIv sˈɛnts"


def test_overrides(g2p):
    assert g2p("[Kokoro](/kˈOkəɹO/) cat").phonemes == "kˈOkəɹO kˈæt"
    assert g2p("[cat](-2)").phonemes == "kæt"
    assert g2p("[105](#&#)").phonemes == "wˈʌn hˈʌndɹəd ˈænd fˈIv"


def test_unknown_words_use_placeholder(lexicon, tagger):
    assert G2P(lexicon=lexicon, tagger=tagger).convert("zzq cat").phonemes == "❓ kˈæt"
    assert G2P(lexicon=lexicon, tagger=tagger, unk='?').convert("zzq cat").phonemes == "? kˈæt"


def test_unresolvable_group_is_left_unknown(g2p):
    # Known limitation: "cat" is known but the group as a whole is not
    # resolved without a fallback.
    ps, tokens = g2p("cat/zzq")
    assert ps == "❓"
    assert [tk.text for tk in tokens] == ["cat/zzq"]


def test_fallback_resolves_unknown_words(lexicon, tagger):
    engine = G2P(lexicon=lexicon, tagger=tagger, fallback=lambda tk: ('zˈɪk', 1))
    ps, tokens = engine("zzq cat/zzq")
    assert ps == "zˈɪk zˈɪk"
    assert [tk.rating for tk in tokens] == [1, 1]


def test_tokens_rejoin_to_cleaned_text(g2p):
    text = "I can't pay $5.25, ok?"
    _, tokens = g2p(text)
    assert ''.join(tk.text + tk.whitespace for tk in tokens) == text


def test_empty_text(g2p):
    assert g2p("   ") == ("", [])


def test_engine_loads_lexicon_from_directory(vocab_dir):
    engine = G2P(vocab_dir=vocab_dir, tagger=FakeTagger())
    assert engine("hello").phonemes == "həlˈO"


def test_debug_logging(g2p, caplog):
    caplog.set_level(logging.DEBUG, logger='kokoro_g2p')
    g2p("hello")
    assert "Result phonemes 'həlˈO'" in caplog.text


@pytest.mark.parametrize('language', ['ja', 'zh', 'klingon', Language.ja])
def test_unsupported_languages(language):
    with pytest.raises(InvalidInputError, match='Unsupported language'):
        make_g2p(language)


def test_english_factory(lexicon, british_lexicon, tagger):
    engine = make_g2p('en-gb', lexicon=british_lexicon, tagger=tagger)
    assert isinstance(engine, G2P)
    assert engine.british
    assert make_g2p(Language.en_us, lexicon=lexicon, tagger=tagger).lexicon is lexicon


def test_espeak_languages(fake_espeak, monkeypatch):
    monkeypatch.setattr(fake_espeak, 'outputs', ["«bɔʒuʁ» t^ʃe^ɪ’ "])
    engine = make_g2p('fr')
    assert isinstance(engine, EspeakG2P)
    assert engine.backend.language == 'fr-fr'
    assert engine("(bonjour)") == ("(bɔʒuʁ) ʧA", [])
    assert engine.backend.seen == ["«bonjour»"]


def test_espeak_without_output(fake_espeak, monkeypatch):
    monkeypatch.setattr(fake_espeak, 'outputs', [])
    with pytest.raises(InvalidInputError):
        EspeakG2P('pt-br').convert("olá")


def test_espeak_fallback(fake_espeak, monkeypatch):
    monkeypatch.setattr(fake_espeak, 'outputs', ["həlˈo^ʊ"])
    fallback = EspeakFallback()
    assert fallback.backend.language == 'en-us'
    assert fallback(Token('hello', 'UH')) == ('həlˈO', 1)


def test_british_espeak_fallback(fake_espeak, monkeypatch):
    monkeypatch.setattr(fake_espeak, 'outputs', ["təmˈɑːtə^ʊ"])
    fallback = EspeakFallback(british=True)
    assert fallback.backend.language == 'en-gb'
    assert fallback(Token('tomato', 'NN')) == ('təmˈɑːtQ', 1)


def test_injected_lexicon_decides_the_dialect(lexicon, british_lexicon, tagger):
    assert not make_g2p('en-gb', lexicon=lexicon, tagger=tagger).british
    assert G2P(lexicon=british_lexicon, tagger=tagger).british


def test_very_long_numeral(g2p):
    assert g2p('1' * 400).phonemes == ' '.join(['wˈʌn'] * 400)
