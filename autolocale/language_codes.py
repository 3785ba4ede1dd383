"""
Locale display names used in prompts.

CMS locale identifiers come as ISO 639-1 codes ('de') or language-region
codes in either BCP 47 ('pt-BR') or underscore form ('pt_BR'). The model gets
a human-readable name next to the code.
"""

from typing import Optional

# ISO 639-1 language codes (2-letter), common CMS locales
ISO_639_1 = {
    'ar': 'Arabic', 'bg': 'Bulgarian', 'bn': 'Bengali', 'ca': 'Catalan',
    'cs': 'Czech', 'cy': 'Welsh', 'da': 'Danish', 'de': 'German',
    'el': 'Greek', 'en': 'English', 'es': 'Spanish', 'et': 'Estonian',
    'eu': 'Basque', 'fa': 'Persian', 'fi': 'Finnish', 'fr': 'French',
    'ga': 'Irish', 'gl': 'Galician', 'he': 'Hebrew', 'hi': 'Hindi',
    'hr': 'Croatian', 'hu': 'Hungarian', 'id': 'Indonesian', 'is': 'Icelandic',
    'it': 'Italian', 'ja': 'Japanese', 'ko': 'Korean', 'lb': 'Luxembourgish',
    'lt': 'Lithuanian', 'lv': 'Latvian', 'ms': 'Malay', 'mt': 'Maltese',
    'nb': 'Norwegian Bokmal', 'nl': 'Dutch', 'no': 'Norwegian', 'pl': 'Polish',
    'pt': 'Portuguese', 'ro': 'Romanian', 'ru': 'Russian', 'sk': 'Slovak',
    'sl': 'Slovenian', 'sq': 'Albanian', 'sr': 'Serbian', 'sv': 'Swedish',
    'th': 'Thai', 'tr': 'Turkish', 'uk': 'Ukrainian', 'ur': 'Urdu',
    'vi': 'Vietnamese', 'zh': 'Chinese',
}

# BCP 47 language-region codes where the region changes the wording
REGIONAL_VARIANTS = {
    'en-US': 'English (United States)',
    'en-GB': 'English (United Kingdom)',
    'zh-CN': 'Chinese (Simplified)',
    'zh-TW': 'Chinese (Traditional)',
    'zh-HK': 'Chinese (Traditional, Hong Kong)',
    'es-ES': 'Spanish (Spain)',
    'es-MX': 'Spanish (Mexico)',
    'pt-BR': 'Portuguese (Brazil)',
    'pt-PT': 'Portuguese (Portugal)',
    'fr-CA': 'French (Canada)',
    'de-CH': 'German (Switzerland)',
}


def normalize_code(code: str) -> str:
    """
    Normalize separators and case of a locale code.

    Examples:
        >>> normalize_code('pt_br')
        'pt-BR'
        >>> normalize_code('DE')
        'de'
    """
    parts = code.strip().replace('_', '-').split('-')
    language = parts[0].lower()
    if len(parts) == 1:
        return language
    return '-'.join([language] + [p.upper() if len(p) == 2 else p.title() for p in parts[1:]])


def extract_base_language(code: str) -> str:
    """
    Extract base language from code (remove region).

    Examples:
        >>> extract_base_language('zh_CN')
        'zh'
    """
    return normalize_code(code).split('-')[0]


def get_language_name(code: str) -> Optional[str]:
    """
    Get the language name for a locale code.

    Regional names are preferred; otherwise the base language name is used.

    Examples:
        >>> get_language_name('pt_BR')
        'Portuguese (Brazil)'
        >>> get_language_name('de-AT')
        'German'
        >>> get_language_name('xx') is None
        True
    """
    if not code:
        return None
    normalized = normalize_code(code)
    return REGIONAL_VARIANTS.get(normalized) or ISO_639_1.get(extract_base_language(normalized))


def describe_locale(code: str) -> str:
    """Display string such as 'German (de)', or the bare code when unknown."""
    name = get_language_name(code)
    return f"{name} ({code})" if name else code
