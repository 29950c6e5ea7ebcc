"""
Unit tests for services.team_policy.
Tests access key gating, role rules and ownership checks.
"""
import pytest

from docnotes.core.errors import AuthorizationError, PolicyError, ValidationError
from docnotes.core.security import hash_password
from docnotes.services import team_policy
from docnotes.services.records import Actor, MembershipRecord


def _actor(user_id=1, *memberships):
    return Actor(user_id=user_id, username=f"u{user_id}", memberships=list(memberships))


class TestAccessKeys:

    def test_empty_stored_key_accepts_any_candidate(self):
        assert team_policy.access_keys_match("", "") is True
        assert team_policy.access_keys_match("", "whatever") is True

    def test_stored_hash_requires_matching_candidate(self):
        stored = hash_password("s3cret")
        assert team_policy.access_keys_match(stored, "s3cret") is True
        assert team_policy.access_keys_match(stored, "wrong") is False
        assert team_policy.access_keys_match(stored, "") is False

    def test_plaintext_is_never_compared(self):
        # A plaintext value in storage is not a valid hash, so nothing matches it
        assert team_policy.access_keys_match("s3cret", "s3cret") is False

    def test_change_access_key_hashes_or_clears(self):
        assert team_policy.change_access_key("") == ""
        stored = team_policy.change_access_key("k")
        assert stored != "k"
        assert team_policy.access_keys_match(stored, "k") is True


class TestRoles:

    @pytest.mark.parametrize("role", ["member", "moderator", " Moderator "])
    def test_assignable_roles(self, role):
        assert team_policy.require_assignable_role(role) == role.strip().lower()

    def test_owner_role_cannot_be_assigned(self):
        with pytest.raises(PolicyError) as exc:
            team_policy.require_assignable_role("owner")
        assert exc.value.code == "OWNER_ROLE_FIXED"

    def test_unknown_role(self):
        with pytest.raises(ValidationError) as exc:
            team_policy.require_assignable_role("admin")
        assert exc.value.code == "INVALID_ROLE"

    def test_missing_role(self):
        with pytest.raises(ValidationError) as exc:
            team_policy.require_assignable_role("")
        assert exc.value.code == "MISSING_ROLE"

    def test_can_moderate(self):
        assert team_policy.can_moderate("owner")
        assert team_policy.can_moderate("moderator")
        assert not team_policy.can_moderate("member")
        assert not team_policy.can_moderate(None)


class TestOwnership:

    def test_require_owner(self):
        team_policy.require_owner(1, _actor(1))
        with pytest.raises(AuthorizationError) as exc:
            team_policy.require_owner(1, _actor(2))
        assert exc.value.code == "NOT_TEAM_OWNER"

    def test_anonymous_is_never_owner(self):
        assert team_policy.is_owner(1, None) is False

    def test_teams_moderated_by(self):
        actor = _actor(
            1,
            MembershipRecord(team_id=1, team_name="a", role="owner"),
            MembershipRecord(team_id=2, team_name="b", role="moderator"),
            MembershipRecord(team_id=3, team_name="c", role="member"),
        )
        assert sorted(team_policy.teams_moderated_by(actor, ["a", "b", "c", "d"])) == ["a", "b"]
        assert team_policy.teams_moderated_by(None, ["a"]) == []
