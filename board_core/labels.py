"""
Object labels - Deterministic identifier to 3-word label mapping.

Labels give the agent something short and pronounceable to refer to objects
by. The algorithm follows humanhash: the 16 identifier bytes are split into
three contiguous segments, each segment is XOR-folded to a single byte, and
each byte indexes a 256-word list.

Labels are many-to-one (about 1 in 16.7M for a random pair), so callers must
always be able to fall back to the full identifier.
"""

from functools import reduce
from typing import Any, Optional

WORDS = 3
SEPARATOR = " "

WORDLIST = [
    "ack", "alabama", "alanine", "alaska", "alpha", "angel", "apart", "april",
    "arizona", "arkansas", "artist", "asparagus", "aspen", "august", "autumn",
    "avocado", "bacon", "bakerloo", "batman", "beer", "berlin", "beryllium",
    "black", "blossom", "blue", "bluebird", "bravo", "bulldog", "burger",
    "butter", "california", "carbon", "cardinal", "carolina", "carpet", "cat",
    "ceiling", "charlie", "chicken", "coffee", "cola", "cold", "colorado",
    "comet", "connecticut", "crazy", "cup", "dakota", "december", "delaware",
    "delta", "diet", "don", "double", "early", "earth", "east", "echo",
    "edward", "eight", "eighteen", "eleven", "emma", "enemy", "equal",
    "failed", "fanta", "fifteen", "fillet", "finch", "fish", "five", "fix",
    "floor", "florida", "football", "four", "fourteen", "foxtrot", "freddie",
    "friend", "fruit", "gee", "georgia", "glucose", "golf", "green", "grey",
    "hamper", "happy", "harry", "hawaii", "helium", "high", "hot", "hotel",
    "hydrogen", "idaho", "illinois", "india", "indigo", "ink", "iowa",
    "island", "item", "jersey", "jig", "johnny", "juliet", "july", "jupiter",
    "kansas", "kentucky", "kilo", "king", "kitten", "lactose", "lake", "lamp",
    "lemon", "leopard", "lima", "lion", "lithium", "london", "louisiana",
    "low", "magazine", "magnesium", "maine", "mango", "march", "mars",
    "maryland", "massachusetts", "may", "mexico", "michigan", "mike",
    "minnesota", "mirror", "mississippi", "missouri", "mobile", "mockingbird",
    "monkey", "montana", "moon", "mountain", "muppet", "music", "nebraska",
    "neptune", "network", "nevada", "nine", "nineteen", "nitrogen", "north",
    "november", "nuts", "october", "ohio", "oklahoma", "one", "orange",
    "oranges", "oregon", "oscar", "oven", "oxygen", "papa", "paris", "pasta",
    "pennsylvania", "pip", "pizza", "pluto", "potato", "princess", "purple",
    "quebec", "queen", "quiet", "red", "river", "robert", "robin", "romeo",
    "rugby", "sad", "salami", "saturn", "september", "seven", "seventeen",
    "shade", "sierra", "single", "sink", "six", "sixteen", "skylark", "snake",
    "social", "sodium", "solar", "south", "spaghetti", "speaker", "spring",
    "stairway", "steak", "stream", "summer", "sweet", "table", "tango", "ten",
    "tennessee", "tennis", "texas", "thirteen", "three", "timing", "triple",
    "twelve", "twenty", "two", "uncle", "undress", "uniform", "uranus", "utah",
    "vegan", "venus", "vermont", "victor", "video", "violet", "virginia",
    "washington", "west", "whiskey", "white", "william", "winner", "winter",
    "wisconsin", "wolfram", "wyoming", "xray", "yankee", "yellow", "zebra",
    "zulu",
]


def _compress(data: bytes, target: int) -> list[int]:
    """XOR-fold `data` into `target` bytes. The last segment absorbs the remainder."""
    seg_size = len(data) // target
    result = []
    for i in range(target):
        start = i * seg_size
        end = len(data) if i == target - 1 else start + seg_size
        result.append(reduce(lambda acc, b: acc ^ b, data[start:end], 0))
    return result


def uuid_to_label(identifier: str) -> str:
    """
    Map an identifier to its 3-word label.

    Dashes are ignored, so "bbb13f7a-966e-..." and "bbb13f7a966e..." give the
    same label.

    Raises:
        ValueError: If the identifier is not hexadecimal.
    """
    data = bytes.fromhex(identifier.replace("-", ""))
    return SEPARATOR.join(WORDLIST[b] for b in _compress(data, WORDS))


def object_label(obj: dict[str, Any]) -> Optional[str]:
    """Get an object's label: the stored one, else one computed from its id."""
    if obj.get("label"):
        return obj["label"]
    try:
        return uuid_to_label(str(obj.get("id", "")))
    except ValueError:
        return None
