"""
Test Restaurant API endpoints and the restaurant/menu/employee cascades.
"""


def create_employee(client, headers, name):
    response = client.post("/employee", json={"name": name}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def create_restaurant(client, headers, **overrides):
    payload = {"name": "Trattoria", "location": "Roma", "capacity": 40}
    payload.update(overrides)
    response = client.post("/restaurant", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestRestaurantCrud:
    """Restaurant create, get, edit and list"""

    def test_create_with_menu_and_employees(self, client, user_headers):
        create_employee(client, user_headers, "E1")
        create_employee(client, user_headers, "E2")

        created = create_restaurant(
            client, user_headers,
            menu={"language": "it"},
            employee_ids=[2, 1]
        )

        assert created == {
            "id": 1,
            "name": "Trattoria",
            "location": "Roma",
            "capacity": 40,
            "menu": {"id": 1, "language": "it"},
            "employees": [{"id": 1, "name": "E1"}, {"id": 2, "name": "E2"}],
        }

        response = client.get("/restaurant/1", headers=user_headers)
        assert response.status_code == 200
        assert response.json() == created

    def test_create_without_menu(self, client, user_headers, db):
        created = create_restaurant(client, user_headers)

        assert "menu" not in created
        assert created["employees"] == []
        assert db["menu"].documents == []

    def test_body_ids_are_ignored(self, client, user_headers):
        created = create_restaurant(client, user_headers, id=50, menu={"id": 70, "language": "en"})

        assert created["id"] == 1
        assert created["menu"]["id"] == 1

    def test_duplicate_employee_ids_link_once(self, client, user_headers, db):
        create_employee(client, user_headers, "E1")

        created = create_restaurant(client, user_headers, employee_ids=[1, 1])

        assert len(created["employees"]) == 1
        assert len(db["restaurant_employee"].documents) == 1

    def test_unknown_employee_rejected(self, client, user_headers, db, mongo_client):
        response = client.post(
            "/restaurant",
            json={"name": "R", "location": "L", "employee_ids": [9]},
            headers=user_headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"missing_employee_ids": [9]}
        assert db["restaurant"].documents == []
        assert mongo_client.transactions[-1] == "abort"

    def test_negative_capacity_rejected(self, client, user_headers):
        response = client.post(
            "/restaurant",
            json={"name": "R", "location": "L", "capacity": -1},
            headers=user_headers
        )
        assert response.status_code == 400

    def test_get_missing_restaurant(self, client, user_headers):
        assert client.get("/restaurant/1", headers=user_headers).status_code == 404

    def test_list_restaurants(self, client, user_headers):
        create_restaurant(client, user_headers, name="A")
        create_restaurant(client, user_headers, name="B")

        response = client.get("/restaurant", headers=user_headers)
        assert response.status_code == 200
        assert [r["name"] for r in response.json()] == ["A", "B"]

    def test_edit_merges_menu_in_place(self, client, user_headers, db):
        create_restaurant(client, user_headers, menu={"language": "it"})

        response = client.put(
            "/restaurant/1",
            json={"id": 8, "name": "Osteria", "location": "Roma", "capacity": 20,
                  "menu": {"language": "en"}},
            headers=user_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 1
        assert body["name"] == "Osteria"
        assert body["menu"] == {"id": 1, "language": "en"}
        assert len(db["menu"].documents) == 1

    def test_edit_adds_menu(self, client, user_headers):
        create_restaurant(client, user_headers)

        response = client.put(
            "/restaurant/1",
            json={"name": "Trattoria", "location": "Roma", "menu": {"language": "fr"}},
            headers=user_headers
        )
        assert response.json()["menu"] == {"id": 1, "language": "fr"}

    def test_edit_without_menu_deletes_it(self, client, user_headers, db):
        create_restaurant(client, user_headers, menu={"language": "it"})

        response = client.put(
            "/restaurant/1",
            json={"name": "Trattoria", "location": "Roma"},
            headers=user_headers
        )

        assert response.status_code == 200
        assert "menu" not in response.json()
        assert db["menu"].documents == []
        assert "menu_id" not in db["restaurant"].documents[0]

    def test_edit_synchronizes_employees(self, client, user_headers, db):
        for name in ("E1", "E2", "E3"):
            create_employee(client, user_headers, name)
        create_restaurant(client, user_headers, employee_ids=[1, 2])

        response = client.put(
            "/restaurant/1",
            json={"name": "Trattoria", "location": "Roma", "employee_ids": [2, 3]},
            headers=user_headers
        )

        assert [e["id"] for e in response.json()["employees"]] == [2, 3]
        pairs = sorted(
            (doc["restaurant_id"], doc["employee_id"])
            for doc in db["restaurant_employee"].documents
        )
        assert pairs == [(1, 2), (1, 3)]
        assert len(db["employee"].documents) == 3

    def test_edit_missing_restaurant(self, client, user_headers):
        response = client.put(
            "/restaurant/4",
            json={"name": "R", "location": "L"},
            headers=user_headers
        )
        assert response.status_code == 404


class TestRestaurantDelete:
    """Deleting a restaurant removes its menu and pairs, never its employees"""

    def test_delete_cascades_to_menu_and_pairs(self, client, user_headers, db):
        """Cascade delete"""
        create_employee(client, user_headers, "E1")
        create_employee(client, user_headers, "E2")
        created = create_restaurant(
            client, user_headers,
            name="R", menu={"language": "en"}, employee_ids=[1, 2]
        )

        response = client.delete("/restaurant/1", headers=user_headers)
        assert response.status_code == 200
        assert response.json() == created

        assert client.get("/restaurant/1", headers=user_headers).status_code == 404
        assert db["menu"].documents == []
        assert db["restaurant_employee"].documents == []

        employees = client.get("/employee", headers=user_headers).json()
        assert employees == [{"id": 1, "name": "E1"}, {"id": 2, "name": "E2"}]

    def test_shared_employee_survives_in_other_restaurant(self, client, user_headers):
        create_employee(client, user_headers, "E1")
        create_restaurant(client, user_headers, name="R1", employee_ids=[1])
        create_restaurant(client, user_headers, name="R2", employee_ids=[1])

        client.delete("/restaurant/1", headers=user_headers)

        remaining = client.get("/restaurant/2", headers=user_headers).json()
        assert remaining["employees"] == [{"id": 1, "name": "E1"}]

    def test_delete_missing_restaurant(self, client, user_headers):
        assert client.delete("/restaurant/2", headers=user_headers).status_code == 404


class TestEmployeeDeleteKeepsRestaurants:
    """Deleting an employee only removes its own pairs"""

    def test_links_of_other_employees_remain(self, client, user_headers, db):
        create_employee(client, user_headers, "E1")
        create_employee(client, user_headers, "E2")
        create_restaurant(client, user_headers, name="R1", employee_ids=[1, 2])
        create_restaurant(client, user_headers, name="R2", employee_ids=[1])

        response = client.delete("/employee/1", headers=user_headers)
        assert response.status_code == 200

        restaurants = client.get("/restaurant", headers=user_headers).json()
        assert [r["name"] for r in restaurants] == ["R1", "R2"]
        assert restaurants[0]["employees"] == [{"id": 2, "name": "E2"}]
        assert restaurants[1]["employees"] == []
        assert [
            (doc["restaurant_id"], doc["employee_id"])
            for doc in db["restaurant_employee"].documents
        ] == [(1, 2)]


class TestEmployeeLinks:
    """POST/DELETE /restaurant/{id}/employee/{employee_id}"""

    def test_link_and_unlink(self, client, user_headers):
        create_employee(client, user_headers, "E1")
        create_restaurant(client, user_headers)

        response = client.post("/restaurant/1/employee/1", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["employees"] == [{"id": 1, "name": "E1"}]

        response = client.delete("/restaurant/1/employee/1", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["employees"] == []

        assert client.get("/employee/1", headers=user_headers).status_code == 200

    def test_duplicate_link(self, client, user_headers):
        create_employee(client, user_headers, "E1")
        create_restaurant(client, user_headers, employee_ids=[1])

        response = client.post("/restaurant/1/employee/1", headers=user_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateError"

    def test_link_unknown_employee(self, client, user_headers):
        create_restaurant(client, user_headers)

        response = client.post("/restaurant/1/employee/3", headers=user_headers)
        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "Employee"

    def test_link_unknown_restaurant(self, client, user_headers):
        create_employee(client, user_headers, "E1")

        response = client.post("/restaurant/3/employee/1", headers=user_headers)
        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "Restaurant"

    def test_unlink_missing_pair(self, client, user_headers):
        create_employee(client, user_headers, "E1")
        create_restaurant(client, user_headers)

        response = client.delete("/restaurant/1/employee/1", headers=user_headers)
        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "RestaurantEmployee"
