"""
Shared constants for the prescriber map pipeline and lookup engine.
"""

# ActiveCampaign tag "Doctor - Referring Doctor"
PRESCRIBER_TAG_ID = "45"
CONTACT_PAGE_SIZE = 100

# ActiveCampaign custom field IDs -> semantic field names.
# Field IDs not listed here are ignored when reading fieldValues.
FIELD_MAP = {
    "4": "address1",
    "5": "address2",
    "6": "city",
    "7": "state",
    "8": "zip",
    "9": "specialty",
    "23": "doctorFirstName",
    "24": "doctorLastName",
    "25": "practiceName",
    "26": "doctorEmail",
    "32": "npi",
    "61": "practiceType",
    "111": "prescriberType",
}

UNKNOWN_NAME = "(unknown)"

# Free-text hint appended to Places queries
ENRICHMENT_DOMAIN_HINT = "ophthalmologist"

# Geocoding
GEO_SOURCE_NOMINATIM = "nominatim"
GEO_SOURCE_GOOGLE = "google"
GEO_SOURCES = {GEO_SOURCE_NOMINATIM, GEO_SOURCE_GOOGLE}
NOMINATIM_MIN_INTERVAL_SEC = 1.1
USER_AGENT = "PrescriberMap/1.0"
DEFAULT_HTTP_TIMEOUT = 30

# Progress is logged every N contacts
PROGRESS_EVERY = 25

# Lookup / map view
EARTH_RADIUS_MILES = 3959
METERS_PER_MILE = 1609.34
RADIUS_OPTIONS = (5, 10, 25, 50, 100)
DEFAULT_RADIUS_MILES = 25
DEFAULT_MAP_CENTER = (39.8, -98.5)  # Center of the contiguous US
DEFAULT_MAP_ZOOM = 4
SELECTED_RECORD_ZOOM = 14
LIST_DISPLAY_LIMIT = 100
NAME_SEARCH_MIN_LENGTH = 2
NAME_SEARCH_MAX_RESULTS = 10

# Internal staff addresses are never shown in popups
INTERNAL_EMAIL_DOMAIN = "@myeyes.net"
