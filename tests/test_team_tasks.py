"""Tâches d'équipe : visibilité, modification, suppression, listes filtrées"""

import pytest


@pytest.fixture
def team_setup(client, make_user, make_team):
    """alice (admin) + bob (membre) dans une équipe, carol en dehors"""
    alice = make_user(name="Alice")
    bob = make_user(name="Bob")
    carol = make_user(name="Carol")
    team = make_team(alice, "Produit")
    response = client.post("/api/teams/join", headers=bob["headers"], json={"teamCode": team["teamCode"]})
    assert response.status_code == 200
    return alice, bob, carol, team


def create_task(client, user, **fields):
    response = client.post("/api/tasks", headers=user["headers"], json=fields)
    assert response.status_code == 201, response.text
    return response.json()["data"]["task"]


def test_team_task_visible_and_editable_by_members(client, team_setup):
    alice, bob, carol, team = team_setup
    task = create_task(client, alice, title="Maquette", teamId=team["id"])
    assert task["teamId"] == team["id"]

    assert client.get(f"/api/tasks/{task['id']}", headers=bob["headers"]).status_code == 200

    response = client.put(f"/api/tasks/{task['id']}", headers=bob["headers"], json={"status": "Completed"})
    assert response.status_code == 200
    assert response.json()["data"]["task"]["completedAt"] is not None

def test_team_task_hidden_from_non_members(client, team_setup):
    alice, bob, carol, team = team_setup
    task = create_task(client, alice, title="Maquette", teamId=team["id"])

    assert client.get(f"/api/tasks/{task['id']}", headers=carol["headers"]).status_code == 403
    assert client.put(f"/api/tasks/{task['id']}", headers=carol["headers"], json={"title": "X"}).status_code == 403
    assert client.delete(f"/api/tasks/{task['id']}", headers=carol["headers"]).status_code == 403

def test_team_task_deletable_only_by_creator(client, team_setup):
    """Un membre peut modifier mais pas supprimer la tâche d'un autre"""
    alice, bob, carol, team = team_setup
    task = create_task(client, alice, title="Maquette", teamId=team["id"])

    response = client.delete(f"/api/tasks/{task['id']}", headers=bob["headers"])
    assert response.status_code == 403
    assert response.json()["message"] == "Only the task creator can delete this task"

    assert client.delete(f"/api/tasks/{task['id']}", headers=alice["headers"]).status_code == 200

def test_create_team_task_requires_membership(client, team_setup):
    alice, bob, carol, team = team_setup
    response = client.post("/api/tasks", headers=carol["headers"], json={"title": "X", "teamId": team["id"]})
    assert response.status_code == 403

    response = client.post("/api/tasks", headers=carol["headers"], json={"title": "X", "teamId": 9999})
    assert response.status_code == 404

def test_assignee_must_be_member(client, team_setup):
    alice, bob, carol, team = team_setup
    response = client.post(
        "/api/tasks",
        headers=alice["headers"],
        json={"title": "X", "teamId": team["id"], "assignedTo": carol["id"]}
    )
    assert response.status_code == 400

    task = create_task(client, alice, title="X", teamId=team["id"], assignedTo=bob["id"])
    assert task["assignedTo"] == bob["id"]

    response = client.put(f"/api/tasks/{task['id']}", headers=alice["headers"], json={"assignedTo": carol["id"]})
    assert response.status_code == 400

    response = client.put(f"/api/tasks/{task['id']}", headers=alice["headers"], json={"assignedTo": None})
    assert response.status_code == 200
    assert response.json()["data"]["task"]["assignedTo"] is None

def test_personal_list_excludes_team_tasks(client, team_setup):
    alice, bob, carol, team = team_setup
    create_task(client, alice, title="Perso")
    create_task(client, alice, title="Équipe", teamId=team["id"])

    body = client.get("/api/tasks", headers=alice["headers"]).json()
    assert [t["title"] for t in body["data"]["tasks"]] == ["Perso"]

def test_team_list_with_filters(client, team_setup):
    alice, bob, carol, team = team_setup
    create_task(client, alice, title="Par Alice pour Bob", teamId=team["id"], assignedTo=bob["id"])
    create_task(client, alice, title="Par Alice", teamId=team["id"])
    create_task(client, bob, title="Par Bob", teamId=team["id"])
    create_task(client, bob, title="Perso Bob")

    url = f"/api/tasks?teamId={team['id']}"
    all_titles = {t["title"] for t in client.get(url, headers=bob["headers"]).json()["data"]["tasks"]}
    assert all_titles == {"Par Alice pour Bob", "Par Alice", "Par Bob"}

    assigned = client.get(url + "&filter=assigned", headers=bob["headers"]).json()["data"]["tasks"]
    assert [t["title"] for t in assigned] == ["Par Alice pour Bob"]

    created = client.get(url + "&filter=created", headers=bob["headers"]).json()["data"]["tasks"]
    assert [t["title"] for t in created] == ["Par Bob"]

def test_team_list_requires_membership(client, team_setup):
    alice, bob, carol, team = team_setup
    assert client.get(f"/api/tasks?teamId={team['id']}", headers=carol["headers"]).status_code == 403
    assert client.get("/api/tasks?teamId=9999", headers=carol["headers"]).status_code == 404

def test_team_stats(client, team_setup):
    alice, bob, carol, team = team_setup
    create_task(client, alice, title="A", teamId=team["id"], status="Completed")
    create_task(client, bob, title="B", teamId=team["id"])

    stats = client.get(f"/api/tasks/stats?teamId={team['id']}", headers=bob["headers"]).json()["data"]["stats"]
    assert stats["total"] == 2
    assert stats["completionRate"] == 50.0

    assert client.get(f"/api/tasks/stats?teamId={team['id']}", headers=carol["headers"]).status_code == 403

def test_personal_stats_include_created_team_tasks(client, team_setup):
    """Stats perso : toutes les tâches créées par l'user, y compris en équipe"""
    alice, bob, carol, team = team_setup
    create_task(client, alice, title="Perso")
    create_task(client, alice, title="Équipe", teamId=team["id"])
    create_task(client, bob, title="Par Bob", teamId=team["id"])

    stats = client.get("/api/tasks/stats", headers=alice["headers"]).json()["data"]["stats"]
    assert stats["total"] == 2

    # la liste perso, elle, exclut toujours les tâches d'équipe
    assert client.get("/api/tasks", headers=alice["headers"]).json()["total"] == 1
