"""
Example story used by the demos and tests.

A short treasure hunt that exercises every markup feature: logic blocks,
guarded choices, an auto choice, [br] fragments, interpolation and a loop
back to an earlier page.
"""
from questmark.markup_parser import parse_markup_string
from questmark.model import Document


EXAMPLE_MARKUP = """\
// The Old Lighthouse
-> Shore
{gold = 5}
You wake up on a cold shore with {gold} coins in your pocket.
[br] A lighthouse stands on the cliff above.
* Climb to the lighthouse -> Lighthouse
* Search the beach -> Beach

-> Beach
{gold += 3}
{shell = 1}
Between the rocks you find three more coins and a pearly shell.
* Climb to the lighthouse -> Lighthouse

-> Lighthouse
The keeper eyes your purse of {gold} coins.
* {gold > 6} Pay for the lamp oil -> Lamp
* {shell} Offer the shell -> Lamp
* Walk back to the beach -> Beach

-> Lamp
{gold += -6}
{lamp = 1}
The lamp flares to life and a ship turns toward the shore.
* -> Rescue

-> Rescue
You are rescued with {gold} coins left. [br] The end.
* Finish -> end
"""


def build_example_document(validate: bool = True) -> Document:
    return parse_markup_string(EXAMPLE_MARKUP, validate=validate)
