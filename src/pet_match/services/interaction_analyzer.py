"""Interaction pattern analysis.

Side-effect free helpers comparing a candidate pet with the pets a user
liked and disliked. The same inputs always give the same statistics and the
same summary strings.
"""

from collections.abc import Iterable

from pet_match.entities import InteractionStats, Pet, TraitStats

NO_FAVORITES = "No favorite patterns yet"
NO_DISLIKES = "No dislike patterns yet"


def summarize(candidate: Pet, pets: Iterable[Pet]) -> TraitStats:
    """Count how many pets in a set share each trait with the candidate.

    Species, size and age match on equality. Interests match when the two
    pets share at least one tag.
    """
    candidate_interests = set(candidate.interests)
    total = species = size = age = interests = 0

    for pet in pets:
        total += 1
        if pet.species == candidate.species:
            species += 1
        if pet.size == candidate.size:
            size += 1
        if pet.age == candidate.age:
            age += 1
        if candidate_interests.intersection(pet.interests):
            interests += 1

    return TraitStats(total=total, species=species, size=size, age=age, interests=interests)


def format_patterns(stats: TraitStats, empty_label: str) -> str:
    """Render trait stats for the scoring request.

    Example: ``species: 2/3 (67% match), size: 1/3 (33% match), ... (Total pets: 3)``
    """
    if stats.is_empty:
        return empty_label

    parts = [
        f"{trait}: {count}/{stats.total} ({stats.percentage(count)}% match)"
        for trait, count in stats.counts()
    ]
    return f"{', '.join(parts)} (Total pets: {stats.total})"


def analyze(candidate: Pet, liked: Iterable[Pet], disliked: Iterable[Pet]) -> InteractionStats:
    """Compute interaction statistics for a candidate pet.

    Args:
        candidate: The pet being scored
        liked: Pets the user favorited
        disliked: Pets the user dismissed

    Returns:
        InteractionStats with counts and formatted summaries for both sets
    """
    liked_stats = summarize(candidate, liked)
    disliked_stats = summarize(candidate, disliked)
    return InteractionStats(
        liked=liked_stats,
        disliked=disliked_stats,
        favorite_patterns=format_patterns(liked_stats, NO_FAVORITES),
        dislike_patterns=format_patterns(disliked_stats, NO_DISLIKES),
    )
