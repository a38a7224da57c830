from __future__ import annotations

import random
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

EARLY_BIRD_GOOD = [
    "Starting the day strong! :muscle:",
    "Wow! Give everyone else a chance!",
]
EARLY_BIRD_OK = [
    "First to play gets first place! :first_place_medal:",
    "Early bird gets the lead! :hatching_chick:",
]
EARLY_BIRD_BAD = [
    "In the lead (for now!)",
    ":thinking_face: Not sure that one will hold...",
    "Good luck staying in the lead with that! :crossed_fingers:",
]

AFFIRMATIONS_GOOD = [
    ":star2: Superstar! :star2:",
    "Bish, bash, bosh! :brain:",
    "What a play! :star-struck:",
    "Cowabunga Dude! :tmnt-celebrate:",
    "Jolly good show! :british:",
    "That's gonna be tough to beat! :dart:",
    "By the bushy beard of Thor! :thor:",
]
AFFIRMATIONS_BAD = [
    "In the lead (for now!)",
    ":thinking_face: Not sure that one will hold...",
    "Good luck staying in the lead with that! :crossed_fingers:",
]

CONSOLATIONS = [
    "Can't win 'em all! :cold_sweat:",
    "That one seemed hard for you :melting_face:",
    "You'll get 'em next time (maybe) :shrug-old:",
    "Plays like that are why participation trophies were created :clowntrophy:",
]

# (month, day) -> (good pool, bad pool)
SPECIAL_DAYS: Dict[Tuple[int, int], Tuple[List[str], List[str]]] = {
    (1, 1): (
        ["New year, same genius! :fireworks:", "Starting the year off right! :champagne:"],
        ["New year's resolution: more practice :sweat_smile:", "There's always next year... oh wait :calendar:"],
    ),
    (10, 31): (
        ["Spooky good! :jack_o_lantern:", "A real treat! :candy:"],
        ["That was a trick, not a treat :ghost:", "Scary stuff :skull:"],
    ),
    (12, 25): (
        [":christmas_tree: Merry Christmas, you superstar! :star:", "Santa's putting you on the nice list! :santa:"],
        ["Lump of coal for that one :black_circle:", "Too much eggnog? :glass_of_milk:"],
    ),
}


class FlavorText:
    """Mood lines for result replies. Pass a seeded ``random.Random`` for repeatable picks."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _pick(self, choices: Sequence[str]) -> str:
        return self.rng.choice(choices)

    def early_bird(self, score: int) -> str:
        if score < 3:
            return self._pick(EARLY_BIRD_GOOD)
        if score < 5:
            return self._pick(EARLY_BIRD_OK)
        return self._pick(EARLY_BIRD_BAD)

    def affirmation(self, score: int) -> str:
        if score < 4:
            return self._pick(AFFIRMATIONS_GOOD)
        return self._pick(AFFIRMATIONS_BAD)

    def consolation(self) -> str:
        return self._pick(CONSOLATIONS)

    def special_day(self, day: date, score: int) -> Optional[str]:
        pools = SPECIAL_DAYS.get((day.month, day.day))
        if pools is None:
            return None
        good, bad = pools
        return self._pick(good if score < 4 else bad)
