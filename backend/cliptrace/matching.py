"""Scene synthesis for the match stub.

Nothing here looks at the uploaded video: scenes, timestamps and confidence
scores are drawn from the injected random source.
"""

import random

from . import schemas

SCENE_DESCRIPTIONS = [
    "Intense action sequence",
    "Dramatic confrontation",
    "Emotional dialogue",
    "High-speed chase",
    "Plot twist revelation",
    "Romantic moment",
    "Comic relief",
    "Climactic showdown",
    "Opening sequence",
    "Suspenseful standoff",
]

RANDOM_SCENE_CHAPTER = "Random Scene"

MIN_CONFIDENCE = 80
MAX_CONFIDENCE = 99

# clips are placed inside the first two hours
MAX_START_SECONDS = 2 * 60 * 60 - 1
MIN_CLIP_SECONDS = 15
MAX_CLIP_SECONDS = 60

FIXED_CONFIDENCE = 97


def format_clock(total_seconds: int) -> str:
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def random_timestamp(rng: random.Random) -> str:
    start = rng.randint(0, MAX_START_SECONDS)
    end = start + rng.randint(MIN_CLIP_SECONDS, MAX_CLIP_SECONDS)
    return f"{format_clock(start)} - {format_clock(end)}"


def random_confidence(rng: random.Random) -> int:
    return rng.randint(MIN_CONFIDENCE, MAX_CONFIDENCE)


def synthesize_scene(movie_id: int, rng: random.Random) -> schemas.SceneCreate:
    return schemas.SceneCreate(
        movie_id=movie_id,
        timestamp=random_timestamp(rng),
        description=rng.choice(SCENE_DESCRIPTIONS),
        chapter=RANDOM_SCENE_CHAPTER,
        fingerprint=None,
    )
