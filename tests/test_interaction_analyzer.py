"""
Tests for interaction pattern analysis.
"""

from pet_match.entities import PetSize, Species, TraitStats
from pet_match.services.interaction_analyzer import (
    NO_DISLIKES,
    NO_FAVORITES,
    analyze,
    format_patterns,
    summarize,
)


def test_empty_history_uses_markers(make_pet):
    """With no likes or dislikes both summaries are the fixed markers."""
    stats = analyze(make_pet("rex"), [], [])

    assert stats.favorite_patterns == NO_FAVORITES
    assert stats.dislike_patterns == NO_DISLIKES
    assert stats.liked.is_empty
    assert stats.disliked.is_empty


def test_summarize_counts_each_trait(make_pet):
    candidate = make_pet("rex", species=Species.DOG, size=PetSize.LARGE, age=4, interests=("fetch", "hiking"))
    liked = [
        make_pet("a", species=Species.DOG, size=PetSize.LARGE, age=4, interests=("hiking",)),
        make_pet("b", species=Species.DOG, size=PetSize.SMALL, age=1, interests=("naps",)),
        make_pet("c", species=Species.CAT, size=PetSize.LARGE, age=4, interests=()),
    ]

    stats = summarize(candidate, liked)

    assert stats == TraitStats(total=3, species=2, size=2, age=2, interests=1)


def test_format_patterns_rounds_half_up():
    stats = TraitStats(total=3, species=2, size=1, age=0, interests=3)

    text = format_patterns(stats, NO_FAVORITES)

    assert text == (
        "species: 2/3 (67% match), size: 1/3 (33% match), age: 0/3 (0% match), "
        "shared interests: 3/3 (100% match) (Total pets: 3)"
    )


def test_percentage_half_rounds_up():
    stats = TraitStats(total=8, species=1)
    # 1/8 = 12.5%
    assert stats.percentage(1) == 13
    assert TraitStats(total=0).percentage(0) == 0


def test_analysis_is_deterministic(make_pet, pets):
    candidate = make_pet("new", interests=("fetch",))

    first = analyze(candidate, pets[:2], pets[2:])
    second = analyze(candidate, list(pets[:2]), list(pets[2:]))

    assert first == second
    assert first.favorite_patterns.endswith("(Total pets: 2)")
    assert first.dislike_patterns.endswith("(Total pets: 1)")


def test_disliked_summary_independent_of_liked(make_pet):
    candidate = make_pet("rex", species=Species.CAT)
    disliked = [make_pet("x", species=Species.CAT)]

    stats = analyze(candidate, [], disliked)

    assert stats.favorite_patterns == NO_FAVORITES
    assert stats.dislike_patterns.startswith("species: 1/1 (100% match)")
