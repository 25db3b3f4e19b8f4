"""
Part-of-speech tagger collaborator.

The engine only needs ``tag(text) -> [(surface, tag), ...]`` with Penn
Treebank tags, in input order. Any object offering that method can be passed
to ``G2P(tagger=...)``.
"""
import logging
from typing import List, Protocol, Tuple

import spacy

from .errors import G2PError

logger = logging.getLogger(__name__)


class Tagger(Protocol):
    def tag(self, text: str) -> List[Tuple[str, str]]:
        ...


class SpacyTagger:
    """
    Tagger backed by a spaCy pipeline.

    Args:
        model (str): Name of an installed spaCy English pipeline
        trf (bool): Enable the transformer component instead of tok2vec
    """
    def __init__(self, model='en_core_web_sm', trf=False):
        components = ['transformer' if trf else 'tok2vec', 'tagger']
        try:
            self.nlp = spacy.load(model, enable=components)
        except OSError as e:
            raise G2PError(f"spaCy model '{model}' is not installed") from e
        logger.info("Loaded spaCy tagger %s", model)

    def tag(self, text):
        return [(tk.text, tk.tag_) for tk in self.nlp(text) if not tk.is_space]
