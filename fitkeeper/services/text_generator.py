# backend/fitkeeper/services/text_generator.py
"""Recipe title / intro generation through the OpenAI chat API."""
import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Personalized Exercise Recipe"
DEFAULT_INTRO = "An exercise program recommended for you from your fitness measurement."

SYSTEM_PROMPT = (
    "You write short titles and introductions for exercise programs. "
    'Respond with a single JSON object with exactly the keys "title", "intro" '
    'and "difficulty", and no other text.'
)


@dataclass
class RecipeText:
    title: str = DEFAULT_TITLE
    intro: str = DEFAULT_INTRO
    fallback: bool = False


def default_text() -> RecipeText:
    return RecipeText(fallback=True)


def build_prompt(
    age_group: str,
    age: int,
    gender: str,
    fitness_grade: str,
    difficulty: str,
    exercises: Dict[str, List[str]],
) -> str:
    lines = [
        "Write a title (max 30 characters) and a one or two sentence intro "
        "for this exercise program.",
        f"- age group: {age_group}",
        f"- age: {age}",
        f"- gender: {gender}",
        f"- fitness grade: {fitness_grade}",
        f"- difficulty: {difficulty}",
    ]
    for phase, names in exercises.items():
        lines.append(f"- {phase} exercises: {', '.join(names) or 'none'}")
    return "\n".join(lines)


def parse_text(content: Optional[str]) -> Optional[RecipeText]:
    if not content:
        return None
    try:
        data = json.loads(content)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    title = data.get("title")
    intro = data.get("intro")
    if not isinstance(title, str) or not title.strip():
        return None
    if not isinstance(intro, str) or not intro.strip():
        return None
    return RecipeText(title=title.strip(), intro=intro.strip())


class RecipeTextGenerator:
    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    @classmethod
    def from_config(cls, config) -> "RecipeTextGenerator":
        return cls(
            api_key=config.get("OPENAI_API_KEY"),
            model=config.get("OPENAI_MODEL") or "gpt-4o-mini",
        )

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def generate(self, **context) -> RecipeText:
        if not self.api_key and self._client is None:
            return default_text()

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(**context)},
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.warning(f"Recipe text generation failed, using defaults: {e}")
            return default_text()

        text = parse_text(content)
        if text is None:
            logger.warning("Recipe text generation returned unusable output, using defaults")
            return default_text()
        return text
