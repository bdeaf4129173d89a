"""Tests for likes, followings and user lookups."""

import pytest

from recipeshare.db import social as social_db
from recipeshare.errors import BackendError, SocialError

from tests.fakes import seed_recipe


class TestLikes:
    def test_like_and_count(self, backend, alice, bob):
        seed_recipe(backend, alice.id)

        assert social_db.like_recipe(backend, alice.id, 42) is True
        assert social_db.like_recipe(backend, bob.id, 42) is True

        assert social_db.count_likes(backend, 42) == 2
        assert social_db.is_recipe_liked(backend, bob.id, 42)

    def test_like_twice_is_noop(self, backend, alice):
        seed_recipe(backend, alice.id)
        social_db.like_recipe(backend, alice.id, 42)

        assert social_db.like_recipe(backend, alice.id, 42) is False
        assert social_db.count_likes(backend, 42) == 1

    def test_unlike(self, backend, alice):
        seed_recipe(backend, alice.id)
        social_db.like_recipe(backend, alice.id, 42)
        social_db.unlike_recipe(backend, alice.id, 42)

        assert not social_db.is_recipe_liked(backend, alice.id, 42)
        # Unliking again is harmless
        social_db.unlike_recipe(backend, alice.id, 42)

    def test_liked_recipes_most_recent_first(self, backend, alice):
        seed_recipe(backend, alice.id, recipe_id=1)
        seed_recipe(backend, alice.id, recipe_id=2)
        social_db.like_recipe(backend, alice.id, 2)
        social_db.like_recipe(backend, alice.id, 1)

        assert [r.id for r in social_db.get_liked_recipes(backend, alice.id)] == [1, 2]

    def test_other_failures_raise(self, backend, alice):
        backend.fail("insert", "liked_recipes", "permission denied", code="42501")
        with pytest.raises(BackendError, match="permission denied"):
            social_db.like_recipe(backend, alice.id, 42)


class TestFollowings:
    def test_follow(self, backend, alice, bob):
        assert social_db.follow_user(backend, alice.id, bob.id) is True
        assert social_db.is_following(backend, alice.id, bob.id)
        assert not social_db.is_following(backend, bob.id, alice.id)

        assert [u.username for u in social_db.get_followings(backend, alice.id)] == ["bob"]
        assert [u.username for u in social_db.get_followers(backend, bob.id)] == ["alice"]

    def test_follow_twice_is_noop(self, backend, alice, bob):
        social_db.follow_user(backend, alice.id, bob.id)
        assert social_db.follow_user(backend, alice.id, bob.id) is False
        assert len(backend.tables["followings"]) == 1

    def test_cannot_follow_self(self, backend, alice):
        with pytest.raises(SocialError):
            social_db.follow_user(backend, alice.id, alice.id)
        assert backend.writes() == []

    def test_unfollow(self, backend, alice, bob):
        social_db.follow_user(backend, alice.id, bob.id)
        social_db.unfollow_user(backend, alice.id, bob.id)
        assert social_db.get_followings(backend, alice.id) == []

    def test_feed_has_only_followed_authors(self, backend, alice, bob):
        carol = backend.auth.create_user("carol@example.com", "x", "carol")
        seed_recipe(backend, bob.id, recipe_id=1, title="Bobi supp")
        seed_recipe(backend, carol.id, recipe_id=2, title="Caroli praad")
        seed_recipe(backend, bob.id, recipe_id=3, title="Bobi salat")

        social_db.follow_user(backend, alice.id, bob.id)

        assert [r.title for r in social_db.get_feed(backend, alice.id)] == ["Bobi salat", "Bobi supp"]

    def test_empty_feed(self, backend, alice):
        assert social_db.get_feed(backend, alice.id) == []


class TestUsers:
    def test_lookup_by_username(self, backend, alice):
        profile = social_db.get_user_by_username(backend, "alice")
        assert profile.id == alice.id
        assert profile.email == "alice@example.com"

    def test_unknown_username(self, backend):
        assert social_db.get_user_by_username(backend, "nobody") is None

    def test_profile_by_id(self, backend, bob):
        assert social_db.get_user_profile(backend, bob.id).username == "bob"
        assert social_db.get_user_profile(backend, "missing") is None
