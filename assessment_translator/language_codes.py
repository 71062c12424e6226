"""
Language code mappings and utilities.

Standards:
- ISO 639-1: 2-letter language codes (hi, bn, ta)

Assessments are authored in English; every provider translates from 'en'
into one of the Indian languages listed below. Google Translate covers two
more languages (Nepali, Sanskrit) than the Bhashini pipeline.
"""

from typing import Dict, Iterable, List, Optional

SOURCE_LANGUAGE = 'en'

# code -> (English name, native name)
INDIAN_LANGUAGES = {
    'hi': ('Hindi', 'हिंदी'),
    'bn': ('Bengali', 'বাংলা'),
    'ta': ('Tamil', 'தமிழ்'),
    'te': ('Telugu', 'తెలుగు'),
    'mr': ('Marathi', 'मराठी'),
    'gu': ('Gujarati', 'ગુજરાતી'),
    'kn': ('Kannada', 'ಕನ್ನಡ'),
    'ml': ('Malayalam', 'മലയാളം'),
    'pa': ('Punjabi', 'ਪੰਜਾਬੀ'),
    'or': ('Odia', 'ଓଡ଼ିଆ'),
    'as': ('Assamese', 'অসমীয়া'),
    'ur': ('Urdu', 'اردو'),
    'ne': ('Nepali', 'नेपाली'),
    'sa': ('Sanskrit', 'संस्कृत'),
}

BHASHINI_LANGUAGES = ['hi', 'bn', 'ta', 'te', 'mr', 'gu', 'kn', 'ml', 'pa', 'or', 'as', 'ur']
GOOGLE_LANGUAGES = BHASHINI_LANGUAGES + ['ne', 'sa']

PROVIDER_LANGUAGES = {
    'google': GOOGLE_LANGUAGES,
    'bhashini': BHASHINI_LANGUAGES,
}


def get_language_name(code: str) -> Optional[str]:
    """
    Get the English language name from code.

    Examples:
        >>> get_language_name('hi')
        'Hindi'
        >>> get_language_name('xx') is None
        True
    """
    entry = INDIAN_LANGUAGES.get(code)
    return entry[0] if entry else None


def get_native_name(code: str) -> Optional[str]:
    """Get the language name written in its own script."""
    entry = INDIAN_LANGUAGES.get(code)
    return entry[1] if entry else None


def extract_base_language(code: str) -> str:
    """
    Extract base language from code (remove region).

    Examples:
        >>> extract_base_language('en-US')
        'en'
        >>> extract_base_language('hi')
        'hi'
    """
    return code.split('-')[0]


def languages_match(code1: str, code2: str, strict: bool = False) -> bool:
    """
    Check if two language codes match.

    Args:
        code1: First language code
        code2: Second language code
        strict: If True, must match exactly. If False, base language match is ok.

    Examples:
        >>> languages_match('en', 'en-US')
        True
        >>> languages_match('en', 'en-US', strict=True)
        False
    """
    if strict:
        return code1 == code2

    return extract_base_language(code1) == extract_base_language(code2)


def is_supported(code: str, provider: str = 'google') -> bool:
    """Check whether a provider can translate into the given language."""
    return code in PROVIDER_LANGUAGES.get(provider, [])


def get_supported_languages(provider: str = 'google') -> List[Dict[str, str]]:
    """Language catalogue for a provider, in display order."""
    return [
        {
            'code': code,
            'name': INDIAN_LANGUAGES[code][0],
            'native': INDIAN_LANGUAGES[code][1],
        }
        for code in PROVIDER_LANGUAGES.get(provider, [])
    ]


def normalize_target_languages(codes: Iterable[str], source_language: str = SOURCE_LANGUAGE) -> List[str]:
    """
    Clean a user supplied list of target languages.

    Blank and non-string entries, duplicates and the source language are
    dropped; the first-seen order is kept.

    Examples:
        >>> normalize_target_languages([' hi', 'ta', 'hi', 'en', ''])
        ['hi', 'ta']
    """
    normalised: List[str] = []
    for code in codes:
        if not isinstance(code, str):
            continue
        trimmed = code.strip()
        if not trimmed:
            continue
        if languages_match(trimmed, source_language):
            continue
        if trimmed not in normalised:
            normalised.append(trimmed)
    return normalised
