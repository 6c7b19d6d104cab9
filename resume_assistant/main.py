"""CLI entry point for the Resume Assistant.

A terminal chat loop over the same intent router the API uses, for
trying out routing rules and prompts without the frontend.

Usage:
    python -m resume_assistant.main                 # normal mode (quiet)
    python -m resume_assistant.main --debug         # debug mode (shows API calls)
    python -m resume_assistant.main --name Sam      # answer name questions as Sam
"""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from resume_assistant.agent import create_intent_router

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """Set up logging: WARNING by default, DEBUG when --debug is passed."""
    root_level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=root_level,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )

    if not debug:
        # Silence chatty HTTP loggers even if root is WARNING
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("resume_assistant").setLevel(logging.DEBUG if debug else logging.INFO)


def main():
    """Run the interactive CLI chat loop."""
    parser = argparse.ArgumentParser(description="Resume Assistant CLI")
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including HTTP requests",
    )
    parser.add_argument(
        "--name", default=None,
        help="Visitor name to send with each query",
    )
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    print("\n" + "=" * 60)
    print("  Resume Assistant - CLI Chat")
    print("=" * 60)
    print("  Type your message and press Enter.")
    print("  Commands: 'quit' to exit, 'new' to clear the history.")
    print("=" * 60 + "\n")

    intent_router = create_intent_router()
    history: list[BaseMessage] = []

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break

        if not user_input:
            continue

        if user_input.lower() in ("exit", "quit", "q"):
            print("\nGoodbye!")
            break

        if user_input.lower() == "new":
            history = []
            print("\n>> History cleared.\n")
            continue

        try:
            response = intent_router.handle(
                user_input[:1000], "text", history, user_name=args.name,
            )
        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break
        except Exception as e:
            logger.exception("Error processing message")
            print(f"\nAssistant: I'm sorry, something went wrong: {e}")
            print("     Please try again or type 'new' to clear the history.\n")
            continue

        reply = response["message"]
        metadata = response["metadata"]
        print(f"\nAssistant: {reply}")
        print(f"     [{metadata['model']}]", end="")
        if metadata.get("show_meeting_popup"):
            print(" (meeting form would open)", end="")
        print("\n")

        history += [HumanMessage(content=user_input), AIMessage(content=reply)]


if __name__ == "__main__":
    main()
