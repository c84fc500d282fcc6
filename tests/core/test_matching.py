from skillsync.core.matching import filter_profiles, find_matches, skills_directory
from skillsync.models.profile import Profile

from conftest import ALICE, BOB, CAROL, add_profile


def _profile(id, name, bio=None, teach=(), learn=()):
    return Profile(
        id=id, full_name=name, bio=bio,
        skills_to_teach=list(teach), skills_to_learn=list(learn),
    )


PROFILES = [
    _profile("1", "Ada Lovelace", "Mathematician and writer", teach=["Mathematics"], learn=["Poetry"]),
    _profile("2", "Grace Hopper", None, teach=["COBOL", "Compilers"]),
    _profile("3", None, "Loves python and guitar", learn=["Guitar"]),
]


def test_no_filters_returns_everything():
    assert filter_profiles(PROFILES) == PROFILES


def test_search_matches_name_or_bio_case_insensitively():
    assert [p.id for p in filter_profiles(PROFILES, search="GRACE")] == ["2"]
    assert [p.id for p in filter_profiles(PROFILES, search="python")] == ["3"]
    assert [p.id for p in filter_profiles(PROFILES, search="a")] == ["1", "2", "3"]


def test_skill_matches_substring_of_teach_or_learn_skills():
    assert [p.id for p in filter_profiles(PROFILES, skill="comp")] == ["2"]
    assert [p.id for p in filter_profiles(PROFILES, skill="guitar")] == ["3"]
    assert [p.id for p in filter_profiles(PROFILES, skill="poe")] == ["1"]


def test_search_and_skill_combine():
    assert filter_profiles(PROFILES, search="ada", skill="cobol") == []
    assert [p.id for p in filter_profiles(PROFILES, search="ada", skill="math")] == ["1"]


def test_find_matches_excludes_caller_and_incomplete_profiles(db):
    add_profile(db, ALICE, "Alice", skills_to_teach=["Python"])
    add_profile(db, BOB, "Bob", skills_to_learn=["Python"])
    add_profile(db, CAROL, "Carol", completed=False, skills_to_teach=["Python"])

    assert [p.id for p in find_matches(db, ALICE, skill="python")] == [BOB]


def test_skills_directory_sorted_by_popularity(db):
    add_profile(db, ALICE, "Alice", skills_to_teach=["Python", "Chess"])
    add_profile(db, BOB, "Bob", skills_to_teach=["Chess"], skills_to_learn=["Python"])
    add_profile(db, CAROL, "", skills_to_teach=["Chess"])

    directory = skills_directory(db)

    assert [e["skill"] for e in directory["teach"]] == ["Chess", "Python"]
    assert len(directory["teach"][0]["users"]) == 3
    assert directory["teach"][0]["users"][2]["full_name"] == "Unknown"
    assert directory["learn"] == [
        {"skill": "Python", "users": [{"id": BOB, "full_name": "Bob", "bio": ""}]}
    ]
