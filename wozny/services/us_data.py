"""
US reference tables — states, city abbreviations, ZIP lookup.

Read-only lookup data shared by the normalizers and the address splitter.
Tables are wrapped in MappingProxyType / frozenset so nothing can mutate
them at run time.

The ZIP table densely covers Manhattan and a handful of Boston ZIPs; other
metros carry a few downtown codes. A ZIP missing from the table is a valid
"no match" outcome.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional


# ============================================================================
# STATES
# ============================================================================

US_STATES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
    "DC",
})

US_STATES_FULL: Mapping[str, str] = MappingProxyType({
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID",
    "illinois": "IL", "indiana": "IN", "iowa": "IA", "kansas": "KS",
    "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN",
    "mississippi": "MS", "missouri": "MO", "montana": "MT", "nebraska": "NE",
    "nevada": "NV", "new hampshire": "NH", "new jersey": "NJ",
    "new mexico": "NM", "new york": "NY", "north carolina": "NC",
    "north dakota": "ND", "ohio": "OH", "oklahoma": "OK", "oregon": "OR",
    "pennsylvania": "PA", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT",
    "vermont": "VT", "virginia": "VA", "washington": "WA",
    "west virginia": "WV", "wisconsin": "WI", "wyoming": "WY",
    "district of columbia": "DC",
})


# ============================================================================
# ABBREVIATION DICTIONARIES
# ============================================================================

CITY_ABBREVIATIONS: Mapping[str, str] = MappingProxyType({
    "la": "Los Angeles",
    "sf": "San Francisco",
    "nyc": "New York",
    "bklyn": "Brooklyn",
    "manh": "Manhattan",
    "philly": "Philadelphia",
    "atl": "Atlanta",
    "chi": "Chicago",
    "sea": "Seattle",
    "mia": "Miami",
    "bos": "Boston",
    "dal": "Dallas",
    "dc": "Washington",
    "sd": "San Diego",
    "pdx": "Portland",
})

# Street suffixes and job-title abbreviations
NORMALIZATION_DICTIONARY: Mapping[str, str] = MappingProxyType({
    "st": "Street",
    "ave": "Avenue",
    "rd": "Road",
    "blvd": "Boulevard",
    "dr": "Drive",
    "ln": "Lane",
    "ct": "Court",
    "pl": "Place",
    "pkwy": "Parkway",
    "hwy": "Highway",
    "mgr": "Manager",
    "dept": "Department",
    "asst": "Assistant",
    "dir": "Director",
    "vp": "Vice President",
})


# ============================================================================
# ZIP LOOKUP
# ============================================================================

def _zip_block(codes, city: str, state: str) -> Dict[str, Dict[str, str]]:
    return {code: {"city": city, "state": state} for code in codes}


_ZIPS: Dict[str, Dict[str, str]] = {}

# Manhattan
_ZIPS.update(_zip_block(
    [f"{n:05d}" for n in range(10001, 10041)]
    + ["10044", "10065", "10069", "10075", "10128", "10162"]
    + [f"{n:05d}" for n in range(10101, 10124)]
    + [f"{n:05d}" for n in range(10280, 10283)],
    "New York", "NY",
))
_ZIPS.update(_zip_block(["10451", "10452", "10453", "10454", "10455", "10456"], "Bronx", "NY"))
_ZIPS.update(_zip_block(["11201", "11205", "11206", "11211", "11215", "11217"], "Brooklyn", "NY"))

# Boston
_ZIPS.update(_zip_block(
    ["02108", "02109", "02110", "02111", "02113", "02114", "02115", "02116",
     "02118", "02199", "02210", "02215"],
    "Boston", "MA",
))
_ZIPS.update(_zip_block(["02169", "02170", "02171"], "Quincy", "MA"))
_ZIPS.update(_zip_block(["02138", "02139", "02140", "02141", "02142"], "Cambridge", "MA"))

# Sparse elsewhere
_ZIPS.update(_zip_block(["94102", "94103", "94104", "94105", "94107", "94108"], "San Francisco", "CA"))
_ZIPS.update(_zip_block(["90012", "90013", "90014", "90015", "90017"], "Los Angeles", "CA"))
_ZIPS.update(_zip_block(["60601", "60602", "60603", "60604", "60605", "60606"], "Chicago", "IL"))
_ZIPS.update(_zip_block(["78701", "78702", "78703"], "Austin", "TX"))
_ZIPS.update(_zip_block(["98101", "98102", "98104"], "Seattle", "WA"))
_ZIPS.update(_zip_block(["33101", "33130", "33131", "33132"], "Miami", "FL"))
_ZIPS.update(_zip_block(["20001", "20002", "20004", "20005"], "Washington", "DC"))
_ZIPS.update(_zip_block(["19102", "19103", "19106", "19107"], "Philadelphia", "PA"))

ZIP_LOOKUP: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {code: MappingProxyType(entry) for code, entry in _ZIPS.items()}
)
del _ZIPS


def lookup_zip(zip_code: str) -> Optional[Mapping[str, str]]:
    """Return {city, state} for a 5- or 9-digit ZIP, or None when unknown."""
    if not zip_code:
        return None
    return ZIP_LOOKUP.get(zip_code.strip()[:5])


def state_code_for(name: str) -> Optional[str]:
    """Map a full state name (any case, extra spaces tolerated) to its code."""
    if not name:
        return None
    return US_STATES_FULL.get(" ".join(name.lower().split()))


def is_valid_state_code(code: str) -> bool:
    return bool(code) and code.upper() in US_STATES
