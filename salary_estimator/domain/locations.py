"""Static catalog of search location codes and the city each one scopes.

The catalog is read-only for the lifetime of a run. Codes are the opaque
``locId`` values accepted by the search endpoint; iteration order is the
default scrape order.
"""

from types import MappingProxyType
from typing import List, Mapping

_LOCATION_CITIES = {
    "1132348": "New York",
    "1147401": "San Francisco",
    "1146821": "Los Angeles",
    "1128808": "Chicago",
    "1154532": "Boston",
    "1150505": "Seattle",
    "1139761": "Austin",
    "1138213": "Washington",
    "1155583": "Atlanta",
    "1148170": "Denver",
    "1140171": "Houston",
    "1139977": "Dallas",
    "1152672": "Philadelphia",
    "1147311": "San Diego",
    "1147436": "San Jose",
    "1133904": "Phoenix",
    "1151614": "Portland",
    "1154170": "Miami",
    "1142551": "Minneapolis",
    "1152990": "Pittsburgh",
    "1134644": "Detroit",
    "1153624": "Baltimore",
    "1138644": "Charlotte",
    "1128289": "Salt Lake City",
    "1144541": "Nashville",
    "1138960": "Raleigh",
    "1140845": "St. Louis",
    "1154081": "Columbus",
    "1145013": "Indianapolis",
    "1145845": "Cincinnati",
    "1142397": "Kansas City",
    "1147229": "Sacramento",
    "1154085": "Orlando",
    "1154429": "Tampa",
    "1143460": "Las Vegas",
    "1145826": "Cleveland",
    "1133955": "Milwaukee",
    "1140494": "San Antonio",
    "1154093": "Jacksonville",
    "1130347": "Richmond",
    "1148160": "Boulder",
    "1134653": "Ann Arbor",
    "1133969": "Madison",
    "1138962": "Durham",
    "1146798": "Irvine",
    "1147380": "Palo Alto",
    "1150574": "Redmond",
}

LOCATION_CITIES: Mapping[str, str] = MappingProxyType(_LOCATION_CITIES)


def default_location_codes() -> List[str]:
    """All catalog codes in scrape order."""
    return list(LOCATION_CITIES.keys())
