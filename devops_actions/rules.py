"""String matching rules shared by the handlers."""

import random
import re
import unicodedata
from datetime import datetime

ISSUE_KEY_IN_TITLE = re.compile(r"\[([A-Z][A-Z0-9]*-\d+)\]")
ISSUE_KEY_IN_URL = re.compile(r"https?://[^\s/]+/browse/([A-Z][A-Z0-9]*-\d+)")

# Added to commit messages by our tooling, e.g. '[STUDIO-123] [#456] Fix the widget'.
PULL_REQUEST_TAG = re.compile(r"\[#(\d+)\]")
# Generated by GitHub for merge commits.
MERGE_COMMIT = re.compile(r"Merge pull request #(\d+)")

# e.g. 'Release Candidate 2021-01-12-0426 (Energetic Eagle)'.
RELEASE_TITLE = re.compile(r"^Release Candidate ([0-9-]+) \(([A-Za-z\s]+)\)$")

RELEASE_ADJECTIVES = {
    "a": ["Agile", "Amazing"],
    "b": ["Bold", "Brave"],
    "c": ["Clever", "Curious"],
    "d": ["Daring", "Dazzling"],
    "e": ["Energetic", "Eager"],
    "f": ["Fearless", "Friendly"],
    "g": ["Gentle", "Graceful"],
    "h": ["Happy", "Heroic"],
    "j": ["Jolly", "Jubilant"],
    "k": ["Keen", "Kind"],
    "l": ["Lively", "Lucky"],
    "m": ["Majestic", "Mighty"],
    "n": ["Nimble", "Noble"],
    "p": ["Playful", "Proud"],
    "q": ["Quick", "Quiet"],
    "r": ["Radiant", "Rapid"],
    "s": ["Swift", "Sunny"],
    "t": ["Tenacious", "Tireless"],
    "w": ["Wise", "Witty"],
    "z": ["Zany", "Zealous"],
}

RELEASE_ANIMALS = {
    "a": ["Albatross", "Antelope"],
    "b": ["Badger", "Bison"],
    "c": ["Cheetah", "Condor"],
    "d": ["Dolphin", "Dingo"],
    "e": ["Eagle", "Elk"],
    "f": ["Falcon", "Ferret"],
    "g": ["Gazelle", "Gecko"],
    "h": ["Heron", "Hedgehog"],
    "j": ["Jaguar", "Jackal"],
    "k": ["Kangaroo", "Koala"],
    "l": ["Lynx", "Lemur"],
    "m": ["Meerkat", "Moose"],
    "n": ["Narwhal", "Newt"],
    "p": ["Panda", "Penguin"],
    "q": ["Quail", "Quokka"],
    "r": ["Raven", "Reindeer"],
    "s": ["Sparrow", "Stoat"],
    "t": ["Tiger", "Toucan"],
    "w": ["Walrus", "Wombat"],
    "z": ["Zebra", "Zebu"],
}

POSITIVE_EMOJI = [":tada:", ":rocket:", ":star-struck:", ":sunglasses:", ":muscle:", ":raised_hands:", ":sparkles:"]


def extract_issue_key(title: str | None, body: str | None) -> str | None:
    """Find the Jira issue key a pull request refers to.

    The title is searched for a bracketed key like ``[STUDIO-123]``. Only when it has
    none is the body searched for a Jira link containing the key.
    """
    match = ISSUE_KEY_IN_TITLE.search(title or "")
    if match:
        return match.group(1)
    match = ISSUE_KEY_IN_URL.search(body or "")
    if match:
        return match.group(1)
    return None


def extract_pull_request_number(text: str | None) -> int | None:
    """Find the pull request number in a commit message."""
    match = PULL_REQUEST_TAG.search(text or "")
    if match is None:
        match = MERGE_COMMIT.search(text or "")
    if match is None:
        return None
    return int(match.group(1))


def parameterize(text: str, separator: str = "-") -> str:
    """Turn arbitrary text into a lowercase slug safe for URLs and branch names.

    >>> parameterize("Fix the Widget!")
    'fix-the-widget'
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", separator, ascii_text.lower())
    return slug.strip(separator)


def first_name_from_email(email: str) -> str:
    """'dave.perrett@example.com' -> 'dave'."""
    return re.split(r"[@.]", email, maxsplit=1)[0]


def parse_release_title(title: str | None) -> tuple[str, str] | None:
    """Split a release candidate title into its date token and release name."""
    match = RELEASE_TITLE.match(title or "")
    if match is None:
        return None
    return match.group(1), match.group(2)


def release_notes_from_body(body: str | None) -> str:
    """Drop the heading line of a release pull request body."""
    return "\n".join((body or "").split("\n")[1:])


def release_date_token(now: datetime) -> str:
    return now.strftime("%Y-%m-%d-%H%M")


def release_name(rng: random.Random | None = None) -> str:
    """Pick an alliterative release name such as 'Energetic Eagle'."""
    rng = rng or random.Random()
    letter = rng.choice(sorted(RELEASE_ADJECTIVES))
    return f"{rng.choice(RELEASE_ADJECTIVES[letter])} {rng.choice(RELEASE_ANIMALS[letter])}"


def positive_emoji(rng: random.Random | None = None) -> str:
    return (rng or random.Random()).choice(POSITIVE_EMOJI)
