"""
Phoneme alphabet and stress handling for the Kokoro phoneme set.

Stress levels are the fractional values used throughout the engine:
    -2    strip every stress mark
    -1    demote primary stress to secondary
    -0.5  demote primary stress to secondary (only when primary is present)
     0    demote primary if present, else add secondary stress
     0.5  add secondary stress to an unstressed word
     1    add secondary stress, or promote a lone secondary to primary
     2    promote secondary to primary, or add primary stress
"""
from typing import Optional

# Define stress markers and vowel phonemes for stress placement
PRIMARY_STRESS = 'ˈ'
SECONDARY_STRESS = 'ˌ'
STRESSES = SECONDARY_STRESS + PRIMARY_STRESS

VOWELS = frozenset('AIOQWYaiuæɑɒɔəɛɜɪʊʌᵻ')
CONSONANTS = frozenset('bdfhjklmnpstvwzðŋɡɹɾʃʒʤʧθ')
# Diphthongs and affricates count double when weighing phonemes
DIPHTHONGS = frozenset('AIOQWYʤʧ')
# Vowels (and ɹ) after which an American English "t" is flapped
US_TAUS = frozenset('AIOWYiuæɑəɛɪɹʊʌ')


def restress(ps):
    """
    Move every stress mark to sit directly before the next vowel.

    Args:
        ps (str): Phoneme string with stress marks in arbitrary positions

    Returns:
        str: Phonemes with each mark relocated in front of its vowel
    """
    ips = list(enumerate(ps))
    stresses = {
        i: next((j for j, v in ips[i:] if v in VOWELS), i)
        for i, p in ips if p in STRESSES
    }
    for i, j in stresses.items():
        _, s = ips[i]
        ips[i] = (j - 0.5, s)
    return ''.join(p for _, p in sorted(ips))


def apply_stress(ps: Optional[str], stress: Optional[float]) -> Optional[str]:
    """
    Apply stress to phonemes.

    Args:
        ps (str): The phoneme string
        stress (int/float/None): Stress level indicator:
            - None: Keep stress as is
            - < -1: Remove all stress
            - -1: Convert primary stress to secondary
            - 0, -0.5: Convert primary to secondary if it exists
            - 0, 0.5, 1: Add secondary stress if there is none
            - >= 1: Convert secondary to primary if there is no primary
            - > 1: Add primary stress if no stress exists

    Returns:
        str: Phonemes with appropriate stress markers applied
    """
    if ps is None or stress is None:
        return ps
    elif stress < -1:
        return ps.replace(PRIMARY_STRESS, '').replace(SECONDARY_STRESS, '')
    elif stress == -1 or (stress in (0, -0.5) and PRIMARY_STRESS in ps):
        return ps.replace(SECONDARY_STRESS, '').replace(PRIMARY_STRESS, SECONDARY_STRESS)
    elif stress in (0, 0.5, 1) and all(s not in ps for s in STRESSES):
        if all(v not in ps for v in VOWELS):
            return ps
        return restress(SECONDARY_STRESS + ps)
    elif stress >= 1 and PRIMARY_STRESS not in ps and SECONDARY_STRESS in ps:
        return ps.replace(SECONDARY_STRESS, PRIMARY_STRESS)
    elif stress > 1 and all(s not in ps for s in STRESSES):
        if all(v not in ps for v in VOWELS):
            return ps
        return restress(PRIMARY_STRESS + ps)
    return ps


def stress_weight(ps):
    """
    Calculate the phonetic weight for stress purposes.

    Args:
        ps (str): Phoneme string

    Returns:
        int: Numeric weight, two per diphthong or affricate and one otherwise
    """
    if not ps:
        return 0
    return sum(2 if c in DIPHTHONGS else 1 for c in ps)
