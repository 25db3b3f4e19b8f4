"""
Command line front end.

Usage: kokoro-g2p "Hello, world!"
       echo "Hello, world!" | python -m kokoro_g2p --ids
"""
import argparse
import logging
import sys

from rich.logging import RichHandler

from .errors import G2PError
from .g2p import EspeakFallback, G2P
from .tagger import SpacyTagger
from .vocab import encode

logger = logging.getLogger(__name__)


def setup_logging(verbose=False):
    handler = RichHandler(show_path=False, show_time=False, rich_tracebacks=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
    )


def main(argv=None):
    """Main entry point for the CLI script."""
    parser = argparse.ArgumentParser(description="Convert English text to Kokoro phonemes")
    parser.add_argument("text", nargs="*", help="Text to convert; read from stdin when omitted")
    parser.add_argument("--british", action="store_true", help="Use British English")
    parser.add_argument("--vocab-dir", help="Directory with the JSON dictionaries")
    parser.add_argument("--spacy-model", default="en_core_web_sm", help="spaCy pipeline used for tagging")
    parser.add_argument("--espeak-fallback", action="store_true", help="Phonemize unknown words with espeak")
    parser.add_argument(
        "--ids", action="store_true",
        help="Also print the model input ids; characters outside the vocabulary are dropped unless --unk-id is set",
    )
    parser.add_argument("--unk-id", type=int, help="Model input id used for characters outside the vocabulary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        g2p = G2P(
            british=args.british,
            vocab_dir=args.vocab_dir,
            tagger=SpacyTagger(args.spacy_model),
            fallback=EspeakFallback(british=args.british) if args.espeak_fallback else None,
        )
    except G2PError as e:
        logger.error("%s", e)
        return 1

    lines = [' '.join(args.text)] if args.text else [line for line in sys.stdin.read().splitlines() if line.strip()]
    for line in lines:
        ps, _ = g2p(line)
        print(ps)
        if args.ids:
            print(' '.join(str(i) for i in encode(ps, unk_id=args.unk_id)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
