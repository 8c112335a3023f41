"""Language code normalisation.

Notices declare languages with ISO 639-3 codes ("ENG", "FRA") while label
tables and the CLI use two letter ISO 639-1 codes ("en", "fr").
"""

# Official EU languages, as used by eForms notices
ISO_639_3_TO_1: dict[str, str] = {
    "BUL": "bg",
    "CES": "cs",
    "DAN": "da",
    "DEU": "de",
    "ELL": "el",
    "ENG": "en",
    "EST": "et",
    "FIN": "fi",
    "FRA": "fr",
    "GLE": "ga",
    "HRV": "hr",
    "HUN": "hu",
    "ITA": "it",
    "LAV": "lv",
    "LIT": "lt",
    "MLT": "mt",
    "NLD": "nl",
    "POL": "pl",
    "POR": "pt",
    "RON": "ro",
    "SLK": "sk",
    "SLV": "sl",
    "SPA": "es",
    "SWE": "sv",
}


def to_two_letter(code: str) -> str:
    """Normalise a language code to its lower-case two letter form.

    Unknown codes are returned stripped and lower-cased.
    """
    code = code.strip()
    return ISO_639_3_TO_1.get(code.upper(), code.lower())
