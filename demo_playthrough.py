#!/usr/bin/env python3
"""
Interactive Demo: Markup → Document → Playthrough

Shows the full workflow:
1. Parse and validate markup
2. Drive an Interpreter from the terminal
3. Save progress as YAML on exit

Usage:
    python demo_playthrough.py [story.qm] [--debug]
"""

import logging
import sys

from questmark.examples import EXAMPLE_MARKUP
from questmark.interpreter import Interpreter
from questmark.markup_parser import MarkupParseError, parse_markup_file, parse_markup_string
from questmark.serialization import progress_to_yaml
from questmark.validation import DocumentValidationError


def load(args):
    paths = [a for a in args if not a.startswith("--")]
    if paths:
        return parse_markup_file(paths[0], validate=True)
    return parse_markup_string(EXAMPLE_MARKUP, validate=True)


def play(game: Interpreter) -> None:
    while True:
        page = game.get_current_page()
        if page is None:
            print("\n*** THE END ***" if game.is_finished() else f"\n(no page named {game.current_page_name!r})")
            return

        print()
        for text in page.texts:
            print(game.process_text(text))

        if game.has_auto_choice():
            input("\n[press Enter]")
            game.apply_auto_choice()
            continue

        visible = game.visible_choices()
        print()
        for number, (_, choice) in enumerate(visible, 1):
            print(f"  {number}. {game.process_text(choice.text)}")

        answer = input("> ").strip()
        if answer in ("q", "quit"):
            return
        if not answer.isdigit() or not 1 <= int(answer) <= len(visible):
            print("Pick one of the numbers above.")
            continue
        game.make_choice(visible[int(answer) - 1][0])


def main():
    logging.basicConfig(
        level=logging.DEBUG if "--debug" in sys.argv else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        document = load(sys.argv[1:])
    except (MarkupParseError, DocumentValidationError) as e:
        print(f"Could not load story: {e}")
        sys.exit(1)

    game = Interpreter(document)
    try:
        play(game)
    except (KeyboardInterrupt, EOFError):
        print()

    print("\nProgress snapshot:")
    print(progress_to_yaml(game.get_progress()))


if __name__ == "__main__":
    main()
