"""
Registration normalization.

Registrations are typed by hand, so "g-ebab", " G-EBAB " and "G EBAB" all
refer to the same airframe. Every comparison between registrations goes
through normalize_registration().
"""


def normalize_registration(raw: str) -> str:
    """
    Canonicalize a free-text registration into a comparison key.

    Strips surrounding whitespace, removes interior whitespace and
    upper-cases the result. Never fails; None is treated as empty.

    Args:
        raw: Registration as entered by the user or read from a file

    Returns:
        Normalized registration, possibly empty
    """
    if not raw:
        return ""
    return "".join(raw.split()).upper()
