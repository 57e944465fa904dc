import re
from typing import Optional
from .models import OriginDestination
from .normalize import normalize_value


# "San Leandro, CALoveland, CO": the second city starts right after the state code
CONCATENATED_PAIR = re.compile(
    r"^(?P<city1>.+?),\s*(?P<state1>[A-Z]{2})(?P<city2>[A-Z][a-z][A-Za-z.'\s-]*?),\s*(?P<state2>[A-Z]{2})$"
)
# Looser form, only trusted when a separate destination confirms the page layout
LOOSE_PAIR = re.compile(
    r"^(?P<city1>.+?),\s*(?P<state1>[A-Z]{2})(?P<city2>.+?),\s*(?P<state2>[A-Z]{2})$"
)


def _split(pattern: re.Pattern, text: str) -> Optional[OriginDestination]:
    match = pattern.match(text)
    if not match:
        return None
    return OriginDestination(
        origin=f"{match.group('city1').strip()}, {match.group('state1')}",
        destination=f"{match.group('city2').strip()}, {match.group('state2')}",
    )


def split_origin_destination(
    origin_text: Optional[str],
    destination_text: Optional[str] = None,
) -> OriginDestination:
    """
    Clean an origin/destination pair, undoing the board's habit of gluing
    both cities into the origin cell ("Manteca, CAAurora, CO").

    When the origin holds two "City, ST" pairs, the split wins over any
    separately supplied destination.
    """
    origin = normalize_value(origin_text)
    destination = normalize_value(destination_text)

    if origin:
        split = _split(CONCATENATED_PAIR, origin)
        if split is None and destination and "," in destination:
            split = _split(LOOSE_PAIR, origin)
        if split is not None:
            return split

    return OriginDestination(origin=origin, destination=destination)
