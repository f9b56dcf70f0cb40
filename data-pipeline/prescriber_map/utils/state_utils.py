"""
US state utilities.

Normalizes free-text state values from the CRM ("California", "ca", " CA ")
to 2-letter USPS codes.
"""

from typing import Optional

STATE_NAME_TO_CODE = {
    "Alabama": "AL", "Alaska": "AK", "Arizona": "AZ", "Arkansas": "AR",
    "California": "CA", "Colorado": "CO", "Connecticut": "CT", "Delaware": "DE",
    "Florida": "FL", "Georgia": "GA", "Hawaii": "HI", "Idaho": "ID",
    "Illinois": "IL", "Indiana": "IN", "Iowa": "IA", "Kansas": "KS",
    "Kentucky": "KY", "Louisiana": "LA", "Maine": "ME", "Maryland": "MD",
    "Massachusetts": "MA", "Michigan": "MI", "Minnesota": "MN", "Mississippi": "MS",
    "Missouri": "MO", "Montana": "MT", "Nebraska": "NE", "Nevada": "NV",
    "New Hampshire": "NH", "New Jersey": "NJ", "New Mexico": "NM", "New York": "NY",
    "North Carolina": "NC", "North Dakota": "ND", "Ohio": "OH", "Oklahoma": "OK",
    "Oregon": "OR", "Pennsylvania": "PA", "Rhode Island": "RI", "South Carolina": "SC",
    "South Dakota": "SD", "Tennessee": "TN", "Texas": "TX", "Utah": "UT",
    "Vermont": "VT", "Virginia": "VA", "Washington": "WA", "West Virginia": "WV",
    "Wisconsin": "WI", "Wyoming": "WY",
    "District of Columbia": "DC", "Puerto Rico": "PR", "Guam": "GU",
    "U.S. Virgin Islands": "VI", "American Samoa": "AS", "Northern Mariana Islands": "MP",
}

VALID_STATE_CODES = frozenset(STATE_NAME_TO_CODE.values())

_NAME_LOOKUP = {name.lower(): code for name, code in STATE_NAME_TO_CODE.items()}
_NAME_LOOKUP["washington dc"] = "DC"
_NAME_LOOKUP["washington d.c."] = "DC"
_NAME_LOOKUP["virgin islands"] = "VI"


def normalize_state(value: Optional[str]) -> Optional[str]:
    """
    Normalize a state name or code to its 2-letter code.

    Examples:
        >>> normalize_state("California")
        'CA'
        >>> normalize_state(" ca ")
        'CA'
        >>> normalize_state("Ontario")
        None
    """
    if not value:
        return None

    cleaned = " ".join(str(value).split())
    if not cleaned:
        return None

    upper = cleaned.upper().replace(".", "")
    if upper in VALID_STATE_CODES:
        return upper

    return _NAME_LOOKUP.get(cleaned.lower())
