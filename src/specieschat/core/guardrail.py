"""Keyword guardrail that refuses clearly off-topic questions.

A message is refused when some word contains an off-topic keyword and
no word contains an animal keyword. Matching is substring-within-word,
so "carpet" counts as off-topic ("car") and "birdsong" as on-topic
("bird"). This is a cheap heuristic, not topic classification.
"""

REFUSAL_MESSAGE = (
    "I'm a species chatbot specialized in animals and wildlife. "
    "Please ask about an animal or species!"
)

OFF_TOPIC_KEYWORDS: tuple[str, ...] = (
    "weather",
    "politics",
    "sports",
    "cooking",
    "recipe",
    "music",
    "movie",
    "book",
    "math",
    "programming",
    "code",
    "computer",
    "phone",
    "car",
    "house",
    "job",
    "school",
    "university",
    "travel",
    "vacation",
    "money",
    "finance",
    "stock",
)

ANIMAL_KEYWORDS: tuple[str, ...] = (
    "animal",
    "species",
    "wildlife",
    "habitat",
    "diet",
    "behavior",
    "conservation",
    "mammal",
    "bird",
    "fish",
    "reptile",
    "amphibian",
    "insect",
    "endangered",
    "extinct",
    "predator",
    "prey",
    "ecosystem",
    "migration",
    "breeding",
    "nocturnal",
    "diurnal",
    "camouflage",
    "adaptation",
    "taxonomy",
    "carnivore",
    "herbivore",
    "omnivore",
    "invertebrate",
    "vertebrate",
)


def _words(message: str) -> list[str]:
    return message.lower().split()


def _mentions_any(words: list[str], keywords: tuple[str, ...]) -> bool:
    return any(keyword in word for keyword in keywords for word in words)


def contains_animal_keywords(message: str) -> bool:
    """Return True if any word of *message* contains an animal keyword."""
    return _mentions_any(_words(message), ANIMAL_KEYWORDS)


def is_off_topic(message: str) -> bool:
    """Return True if *message* should be refused without calling the model."""
    return _mentions_any(
        _words(message), OFF_TOPIC_KEYWORDS
    ) and not contains_animal_keywords(message)
