"""Category catalog: theme name -> candidate secret words.

The catalog is read-only once built. Clients only ever see the category
names; the word lists stay on the server.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from imposter.services.rooms.errors import InvalidCategory


DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    "Pop Culture": [
        "Beyoncé", "Taylor Swift", "Marvel", "TikTok", "Netflix",
        "iPhone", "YouTube", "Kanye West", "Kim Kardashian", "Instagram",
        "Disney", "Harry Styles", "Rihanna", "Adele", "BTS",
        "Dua Lipa", "Elon Musk", "Billie Eilish", "Zendaya", "Bad Bunny",
    ],
    "TV Shows": [
        "Stranger Things", "Breaking Bad", "Friends", "Game of Thrones",
        "The Office", "Grey's Anatomy", "Squid Game", "Wednesday",
        "Euphoria", "The Crown", "Succession", "Ozark",
        "The Mandalorian", "Black Mirror", "Ted Lasso",
        "Yellowstone", "The Bear", "White Lotus", "House of Dragon", "Severance",
    ],
    "Movies": [
        "Titanic", "Avatar", "The Dark Knight", "Inception",
        "Avengers", "Jurassic Park", "Star Wars", "The Lion King",
        "Frozen", "Harry Potter", "Top Gun", "Interstellar",
        "Gladiator", "The Matrix", "Barbie",
        "Oppenheimer", "Dune", "Everything Everywhere", "Parasite", "Get Out",
    ],
    "Sports": [
        "Soccer", "Basketball", "Tennis", "Swimming",
        "Baseball", "Golf", "Boxing", "Olympics",
        "Super Bowl", "World Cup", "NFL", "NBA",
        "Formula 1", "Gymnastics", "Volleyball",
        "Hockey", "Wrestling", "MMA", "Marathon", "Skateboarding",
    ],
}


class CategoryCatalog:
    def __init__(self, categories: Optional[Mapping[str, Sequence[str]]] = None):
        source = DEFAULT_CATEGORIES if categories is None else categories
        if not source:
            raise ValueError('catalog needs at least one category')
        self._categories: Dict[str, tuple] = {}
        for name, words in source.items():
            if not words:
                raise ValueError(f'category {name!r} has no words')
            self._categories[name] = tuple(words)

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and name in self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def names(self) -> List[str]:
        return list(self._categories)

    def words_for(self, name) -> tuple:
        if name not in self:
            raise InvalidCategory()
        return self._categories[name]
