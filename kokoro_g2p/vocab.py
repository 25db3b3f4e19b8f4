"""
Mapping from phoneme strings to Kokoro model input ids.
"""
from typing import List, Optional

import torch
import torch.nn.utils.rnn as rnn

# Mapping from phoneme characters to integer IDs for the model
PHONEME_TO_ID = {
    ";": 1,
    ":": 2,
    ",": 3,
    ".": 4,
    "!": 5,
    "?": 6,
    "—": 9,
    "…": 10,
    "\"": 11,
    "(": 12,
    ")": 13,
    "“": 14,
    "”": 15,
    " ": 16,
    "\u0303": 17,
    "ʣ": 18,
    "ʥ": 19,
    "ʦ": 20,
    "ʨ": 21,
    "ᵝ": 22,
    "\uAB67": 23,
    "A": 24,
    "I": 25,
    "O": 31,
    "Q": 33,
    "S": 35,
    "T": 36,
    "W": 39,
    "Y": 41,
    "ᵊ": 42,
    "a": 43,
    "b": 44,
    "c": 45,
    "d": 46,
    "e": 47,
    "f": 48,
    "h": 50,
    "i": 51,
    "j": 52,
    "k": 53,
    "l": 54,
    "m": 55,
    "n": 56,
    "o": 57,
    "p": 58,
    "q": 59,
    "r": 60,
    "s": 61,
    "t": 62,
    "u": 63,
    "v": 64,
    "w": 65,
    "x": 66,
    "y": 67,
    "z": 68,
    "ɑ": 69,
    "ɐ": 70,
    "ɒ": 71,
    "æ": 72,
    "β": 75,
    "ɔ": 76,
    "ɕ": 77,
    "ç": 78,
    "ɖ": 80,
    "ð": 81,
    "ʤ": 82,
    "ə": 83,
    "ɚ": 85,
    "ɛ": 86,
    "ɜ": 87,
    "ɟ": 90,
    "ɡ": 92,
    "ɥ": 99,
    "ɨ": 101,
    "ɪ": 102,
    "ʝ": 103,
    "ɯ": 110,
    "ɰ": 111,
    "ŋ": 112,
    "ɳ": 113,
    "ɲ": 114,
    "ɴ": 115,
    "ø": 116,
    "ɸ": 118,
    "θ": 119,
    "œ": 120,
    "ɹ": 123,
    "ɾ": 125,
    "ɻ": 126,
    "ʁ": 128,
    "ɽ": 129,
    "ʂ": 130,
    "ʃ": 131,
    "ʈ": 132,
    "ʧ": 133,
    "ʊ": 135,
    "ʋ": 136,
    "ʌ": 138,
    "ɣ": 139,
    "ɤ": 140,
    "χ": 142,
    "ʎ": 143,
    "ʒ": 147,
    "ʔ": 148,
    "ˈ": 156,
    "ˌ": 157,
    "ː": 158,
    "ʰ": 162,
    "ʲ": 164,
    "↓": 169,
    "→": 171,
    "↗": 172,
    "↘": 173,
    "ᵻ": 177,
}

# Boundary id placed before and after every sequence, also used as padding
PAD_ID = 0


def encode(ps: str, unk_id: Optional[int] = None) -> List[int]:
    """
    Map a phoneme string to model input ids.

    Args:
        ps (str): Phoneme string
        unk_id (int/None): Id for characters missing from PHONEME_TO_ID;
            such characters are dropped when None

    Returns:
        list: [0, *ids, 0]
    """
    ids = []
    for p in ps:
        i = PHONEME_TO_ID.get(p, unk_id)
        if i is not None:
            ids.append(i)
    return [PAD_ID, *ids, PAD_ID]


def batch_encode(phonemes: List[str], unk_id: Optional[int] = None):
    """
    Encode several phoneme strings into one padded batch.

    Returns:
        tuple: (
            torch.Tensor: input ids of shape (batch, max_len), padded with 0,
            torch.Tensor: length of every sequence including boundaries
        )
    """
    input_id_tensors = [torch.tensor(encode(ps, unk_id), dtype=torch.long) for ps in phonemes]
    input_lengths = torch.tensor([toks.shape[0] for toks in input_id_tensors], dtype=torch.long)
    input_ids = rnn.pad_sequence(input_id_tensors, batch_first=True, padding_value=PAD_ID)
    return input_ids, input_lengths
