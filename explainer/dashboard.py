"""
Terminal dashboard: type a concept (or pick a preset topic), get an explanation
from the server, and optionally have it read aloud.

Start the API first (uvicorn explainer.api:app --port 8000), then:
  python -m explainer.dashboard --username alice

Commands:
  <text>        explain <text>
  /1 .. /6      explain a preset topic
  /topics       list preset topics
  /read         read the current explanation aloud (again to stop)
  /signout      leave the dashboard
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Callable

import httpx

from explainer.config import get_settings
from explainer.interaction.controller import InteractionController
from explainer.interaction.service_client import ServiceClient
from explainer.interaction.speech import SpeechController
from explainer.interaction.state import InteractionState
from explainer.interaction.topics import PRESET_TOPICS
from explainer.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _print_state(state: InteractionState) -> None:
    if state.loading:
        print("Generating explanation...")
        return
    if state.error:
        print(f"Error: {state.error}")
    elif state.explanation:
        print("\nExplanation:\n")
        print(state.explanation)
        print("\n(/read to hear it)")


def _print_topics(topics: list[str]) -> None:
    for i, topic in enumerate(topics, start=1):
        print(f"  /{i}  {topic}")


def _resolve_username(arg: str | None, read: Callable[[str], str] = input) -> str:
    """Block until a username is available: flag, then environment, then prompt."""
    username = (arg or os.environ.get("EXPLAINER_USERNAME", "")).strip()
    while not username:
        username = read("Username: ").strip()
    return username


async def run_dashboard(username: str, api_url: str, topics: list[str] | None = None) -> None:
    speech = SpeechController(notify=lambda msg: print(f"[!] {msg}"))
    async with ServiceClient(api_url) as service:
        if topics is None:
            try:
                topics = await service.list_topics()
            except httpx.HTTPError as e:
                logger.warning("Could not load topics from %s: %s", api_url, e)
                topics = list(PRESET_TOPICS)
        controller = InteractionController(service, speech=speech, loop=asyncio.get_running_loop())
        print(f"Welcome, {username}")
        print("What do you want to learn today?")
        _print_topics(topics)
        try:
            while True:
                line = (await asyncio.to_thread(input, "> ")).strip()
                if not line:
                    continue
                if line in ("/signout", "/quit"):
                    break
                if line == "/topics":
                    _print_topics(topics)
                    continue
                if line == "/read":
                    controller.toggle_speech()
                    if speech.has_active_utterance:
                        print("Reading... (/read again to stop)")
                    continue
                if line.startswith("/") and line[1:].isdigit():
                    index = int(line[1:]) - 1
                    if not 0 <= index < len(topics):
                        print("No such topic.")
                        continue
                    print(f"Explaining {topics[index]}...")
                    await controller.select_topic(topics[index])
                else:
                    controller.set_query(line)
                    await controller.submit()
                _print_state(controller.state)
        except (EOFError, KeyboardInterrupt):
            pass
        finally:
            controller.teardown()
    print(f"Signed out. Goodbye, {username}.")


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Concept explainer dashboard")
    parser.add_argument("--username", default=None, help="Signed-in user (or EXPLAINER_USERNAME)")
    parser.add_argument("--api-url", default=settings.api_url, help=f"Explanation server (default {settings.api_url})")
    parser.add_argument("--log-level", default="WARNING", help="Dashboard log level")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    try:
        username = _resolve_username(args.username)
    except (EOFError, KeyboardInterrupt):
        sys.exit(1)
    asyncio.run(run_dashboard(username, args.api_url))


if __name__ == "__main__":
    main()
