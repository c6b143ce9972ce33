"""HTTP tests for the team lifecycle and the member/manager policies."""

import unittest
from unittest.mock import ANY, patch

from newcloud_auth.models.user import ROLE_SITE_ADMIN
from newcloud_auth.services import teams
from tests.support import PREFIX, ApiTestCase


class TeamApiTestCase(ApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.alice, self.alice_headers = self.user_with_token("alice")
        self.bob, self.bob_headers = self.user_with_token("bob")

    def create_team(self, name: str = "Eng", headers=None) -> dict:
        resp = self.client.post(
            f"{PREFIX}/teams", headers=headers or self.alice_headers, json={"name": name}
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def add_member(self, team_id: int, user_id: int, role: str = "member"):
        return self.client.post(
            f"{PREFIX}/teams/{team_id}/members",
            headers=self.alice_headers,
            json={"userId": user_id, "role": role},
        )


class TestTeamCreation(TeamApiTestCase):

    def test_creator_is_sole_manager(self) -> None:
        team = self.create_team("Eng")
        self.assertEqual(team["name"], "Eng")
        detail = self.client.get(f"{PREFIX}/teams/{team['id']}", headers=self.alice_headers)
        self.assertEqual(detail.status_code, 200)
        body = detail.json()
        self.assertEqual(body["role"], "manager")
        self.assertEqual(
            body["members"],
            [{"id": self.alice.id, "username": "alice", "email": None, "role": "manager"}],
        )

    def test_empty_name_rejected(self) -> None:
        for name in ["", "   "]:
            resp = self.client.post(f"{PREFIX}/teams", headers=self.alice_headers, json={"name": name})
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json()["error"], "validation")
        self.assertEqual(self.client.get(f"{PREFIX}/teams", headers=self.alice_headers).json(), [])

    def test_requires_authentication(self) -> None:
        self.assertEqual(self.client.post(f"{PREFIX}/teams", json={"name": "Eng"}).status_code, 401)
        self.assertEqual(self.client.get(f"{PREFIX}/teams").status_code, 401)

    def test_list_teams_with_roles(self) -> None:
        eng = self.create_team("Eng")
        ops = self.create_team("Ops", headers=self.bob_headers)
        self.client.post(
            f"{PREFIX}/teams/{ops['id']}/members",
            headers=self.bob_headers,
            json={"userId": self.alice.id},
        )
        listed = self.client.get(f"{PREFIX}/teams", headers=self.alice_headers).json()
        self.assertEqual([(t["name"], t["role"]) for t in listed], [("Eng", "manager"), ("Ops", "member")])
        self.assertEqual(listed[0]["id"], eng["id"])


class TestTeamAccess(TeamApiTestCase):

    def test_non_member_cannot_see_details(self) -> None:
        team = self.create_team("Eng")
        resp = self.client.get(f"{PREFIX}/teams/{team['id']}", headers=self.bob_headers)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "forbidden")

    def test_global_admin_role_does_not_grant_team_access(self) -> None:
        team = self.create_team("Eng")
        _, admin_headers = self.user_with_token("root", role=ROLE_SITE_ADMIN)
        resp = self.client.get(f"{PREFIX}/teams/{team['id']}", headers=admin_headers)
        self.assertEqual(resp.status_code, 403)

    def test_member_cannot_delete_but_manager_can(self) -> None:
        team = self.create_team("Eng")
        self.assertEqual(self.add_member(team["id"], self.bob.id).status_code, 201)

        as_bob = self.client.delete(f"{PREFIX}/teams/{team['id']}", headers=self.bob_headers)
        self.assertEqual(as_bob.status_code, 403)

        as_alice = self.client.delete(f"{PREFIX}/teams/{team['id']}", headers=self.alice_headers)
        self.assertEqual(as_alice.status_code, 200)
        self.assertEqual(as_alice.json()["message"], "Team deleted successfully")

        gone = self.client.get(f"{PREFIX}/teams/{team['id']}", headers=self.alice_headers)
        self.assertEqual(gone.status_code, 404)
        self.assertEqual(self.client.get(f"{PREFIX}/teams", headers=self.bob_headers).json(), [])

    def test_member_cannot_manage_membership(self) -> None:
        team = self.create_team("Eng")
        self.add_member(team["id"], self.bob.id)
        carol = self.make_user("carol")
        resp = self.client.post(
            f"{PREFIX}/teams/{team['id']}/members",
            headers=self.bob_headers,
            json={"userId": carol.id},
        )
        self.assertEqual(resp.status_code, 403)
        resp = self.client.put(
            f"{PREFIX}/teams/{team['id']}",
            headers=self.bob_headers,
            json={"name": "Hijacked"},
        )
        self.assertEqual(resp.status_code, 403)

    def test_member_sees_details(self) -> None:
        team = self.create_team("Eng")
        self.add_member(team["id"], self.bob.id)
        body = self.client.get(f"{PREFIX}/teams/{team['id']}", headers=self.bob_headers).json()
        self.assertEqual(body["role"], "member")
        self.assertEqual({m["username"] for m in body["members"]}, {"alice", "bob"})


class TestTeamUpdate(TeamApiTestCase):

    def test_update_name_and_description(self) -> None:
        team = self.create_team("Eng")
        resp = self.client.put(
            f"{PREFIX}/teams/{team['id']}",
            headers=self.alice_headers,
            json={"name": "Engineering", "description": "Builds things"},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["name"], "Engineering")
        self.assertEqual(body["description"], "Builds things")
        self.assertIsNotNone(body["updated_at"])

    def test_update_validation(self) -> None:
        team = self.create_team("Eng")
        url = f"{PREFIX}/teams/{team['id']}"
        empty = self.client.put(url, headers=self.alice_headers, json={"name": ""})
        self.assertEqual(empty.status_code, 400)
        too_long = self.client.put(url, headers=self.alice_headers, json={"name": "Eng", "description": "x" * 501})
        self.assertEqual(too_long.status_code, 400)
        at_limit = self.client.put(url, headers=self.alice_headers, json={"name": "Eng", "description": "x" * 500})
        self.assertEqual(at_limit.status_code, 200)

    def test_update_unknown_team(self) -> None:
        resp = self.client.put(f"{PREFIX}/teams/9999", headers=self.alice_headers, json={"name": "X"})
        self.assertEqual(resp.status_code, 404)


class TestMembership(TeamApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.team = self.create_team("Eng")

    def test_add_member(self) -> None:
        resp = self.add_member(self.team["id"], self.bob.id)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json(), {"team_id": self.team["id"], "user_id": self.bob.id, "role": "member"})

    def test_add_duplicate_member_conflicts(self) -> None:
        self.add_member(self.team["id"], self.bob.id)
        resp = self.add_member(self.team["id"], self.bob.id, role="manager")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "conflict")

    def test_add_unknown_user(self) -> None:
        self.assertEqual(self.add_member(self.team["id"], 9999).status_code, 404)

    def test_add_with_invalid_role(self) -> None:
        self.assertEqual(self.add_member(self.team["id"], self.bob.id, role="owner").status_code, 400)

    def test_remove_member(self) -> None:
        self.add_member(self.team["id"], self.bob.id)
        url = f"{PREFIX}/teams/{self.team['id']}/members/{self.bob.id}"
        resp = self.client.delete(url, headers=self.alice_headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.delete(url, headers=self.alice_headers).status_code, 404)
        self.assertEqual(
            self.client.get(f"{PREFIX}/teams/{self.team['id']}", headers=self.bob_headers).status_code,
            403,
        )

    def test_last_manager_cannot_leave_or_step_down(self) -> None:
        base = f"{PREFIX}/teams/{self.team['id']}/members/{self.alice.id}"
        self.assertEqual(self.client.delete(base, headers=self.alice_headers).status_code, 400)
        demote = self.client.put(f"{base}/role", headers=self.alice_headers, json={"role": "member"})
        self.assertEqual(demote.status_code, 400)

    def test_promote_then_first_manager_can_leave(self) -> None:
        self.add_member(self.team["id"], self.bob.id)
        promote = self.client.put(
            f"{PREFIX}/teams/{self.team['id']}/members/{self.bob.id}/role",
            headers=self.alice_headers,
            json={"role": "manager"},
        )
        self.assertEqual(promote.status_code, 200)
        self.assertEqual(promote.json()["role"], "manager")

        leave = self.client.delete(
            f"{PREFIX}/teams/{self.team['id']}/members/{self.alice.id}",
            headers=self.alice_headers,
        )
        self.assertEqual(leave.status_code, 200)
        update = self.client.put(
            f"{PREFIX}/teams/{self.team['id']}", headers=self.bob_headers, json={"name": "Bob's"}
        )
        self.assertEqual(update.status_code, 200)

    def test_manager_role_goes_through_promotion(self) -> None:
        self.add_member(self.team["id"], self.bob.id)
        url = f"{PREFIX}/teams/{self.team['id']}/members/{self.bob.id}/role"
        with patch.object(teams, "promote_to_manager", wraps=teams.promote_to_manager) as promote:
            resp = self.client.put(url, headers=self.alice_headers, json={"role": "manager"})
            self.assertEqual(resp.status_code, 200)
            promote.assert_called_once_with(ANY, self.team["id"], self.bob.id)

            demote = self.client.put(url, headers=self.alice_headers, json={"role": "member"})
            self.assertEqual(demote.status_code, 200)
            self.assertEqual(demote.json()["role"], "member")
            promote.assert_called_once()

    def test_role_change_for_non_member(self) -> None:
        resp = self.client.put(
            f"{PREFIX}/teams/{self.team['id']}/members/{self.bob.id}/role",
            headers=self.alice_headers,
            json={"role": "manager"},
        )
        self.assertEqual(resp.status_code, 404)


if __name__ == "__main__":
    unittest.main()
