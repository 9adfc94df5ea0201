from aiohttp.test_utils import TestClient

from smartcycle.models import User, UserRole
from smartcycle.serializer import EnvelopeSchema, Many
from smartcycle.serializer.models import UserSchema, UserSummarySchema, RideSchema, RideStatsSchema, \
    PaginationInfoSchema


def auth(user: User):
    return {"Authorization": f"Bearer {user.auth_id}"}


class TestUsersView:

    async def test_get_users(self, client: TestClient, random_admin, random_user):
        """Assert that an administrator can list the users."""
        response_schema = EnvelopeSchema.of(users=Many(UserSchema()), pagination=PaginationInfoSchema())
        response = await client.get('/api/v1/users', headers=auth(random_admin))

        response_data = response_schema.load(await response.json())["data"]
        assert {user["id"] for user in response_data["users"]} == {random_admin.id, random_user.id}
        assert response_data["pagination"]["total"] == 2

    async def test_get_users_not_admin(self, client: TestClient, random_user):
        response = await client.get('/api/v1/users', headers=auth(random_user))
        assert response.status == 403

    async def test_create_user(self, client: TestClient, database):
        """Assert that a new token can register its user."""
        response = await client.post('/api/v1/users', json={
            "name": "Jane Smith", "email": "jane@example.com", "phone": "5555555555"
        }, headers={"Authorization": "Bearer deadbeef"})

        assert response.status == 201
        user = EnvelopeSchema.of(user=UserSchema()).load(await response.json())["data"]["user"]
        assert user["auth_id"] == "deadbeef"
        assert user["role"] == UserRole.USER
        assert user["is_active"]

    async def test_register_again_updates(self, client: TestClient, random_user):
        """Assert that registering a second time updates the existing user."""
        response = await client.post('/api/v1/users', json={
            "name": "New Name", "email": random_user.email
        }, headers=auth(random_user))

        assert response.status == 200
        assert (await response.json())["message"] == "User updated successfully."
        assert (await User.get(id=random_user.id)).name == "New Name"
        assert await User.all().count() == 1

    async def test_create_user_taken_email(self, client: TestClient, random_user):
        response = await client.post('/api/v1/users', json={
            "name": "Someone Else", "email": random_user.email
        }, headers={"Authorization": "Bearer deadbeef"})

        assert response.status == 400
        assert not (await response.json())["success"]

    async def test_create_user_bad_phone(self, client: TestClient, database):
        response = await client.post('/api/v1/users', json={
            "name": "Jane Smith", "email": "jane@example.com", "phone": "555"
        }, headers={"Authorization": "Bearer deadbeef"})

        assert response.status == 400
        assert "phone" in (await response.json())["errors"]

    async def test_create_user_no_token(self, client: TestClient, database):
        response = await client.post('/api/v1/users', json={"name": "Jane Smith", "email": "jane@example.com"})
        assert response.status == 401

    async def test_create_user_bad_schema(self, client: TestClient, database):
        """Assert that creating a user with a bad schema gives a descriptive error."""
        response = await client.post('/api/v1/users', json={"bad_schema": "fail"},
                                     headers={"Authorization": "Bearer deadbeef"})

        response_data = EnvelopeSchema().load(await response.json())
        assert not response_data["success"]
        assert any("Unknown field." in error for error in response_data["errors"]["bad_schema"])


class TestUserCountsView:

    async def test_get_counts(self, client: TestClient, random_admin, random_user, random_user_factory):
        """Assert that an administrator can count the users, deactivated ones included."""
        await random_user_factory(is_active=False)

        response = await client.get('/api/v1/users/stats', headers=auth(random_admin))

        assert response.status == 200
        response_data = (await response.json())["data"]
        assert response_data == {"total_users": 3, "active_users": 2, "admin_users": 1}

    async def test_get_counts_not_admin(self, client: TestClient, random_user):
        response = await client.get('/api/v1/users/stats', headers=auth(random_user))
        assert response.status == 403

    async def test_get_counts_no_token(self, client: TestClient, database):
        response = await client.get('/api/v1/users/stats')
        assert response.status == 401


class TestUserView:

    async def test_get_self(self, client: TestClient, random_user):
        response = await client.get(f'/api/v1/users/{random_user.id}', headers=auth(random_user))

        user = EnvelopeSchema.of(user=UserSchema()).load(await response.json())["data"]["user"]
        assert user["name"] == random_user.name

    async def test_get_other_user(self, client: TestClient, random_user, random_user_factory):
        """Assert that a rider cannot see someone else's profile."""
        other = await random_user_factory()
        response = await client.get(f'/api/v1/users/{other.id}', headers=auth(random_user))
        assert response.status == 403

    async def test_admin_gets_user(self, client: TestClient, random_admin, random_user):
        response = await client.get(f'/api/v1/users/{random_user.id}', headers=auth(random_admin))
        assert response.status == 200

    async def test_get_missing_user(self, client: TestClient, random_admin):
        response = await client.get('/api/v1/users/9999', headers=auth(random_admin))
        assert response.status == 404

    async def test_admin_updates_user(self, client: TestClient, random_admin, random_user):
        response = await client.put(f'/api/v1/users/{random_user.id}', json={"role": "admin"},
                                    headers=auth(random_admin))

        assert response.status == 200
        assert (await User.get(id=random_user.id)).is_admin

    async def test_user_cannot_promote_self(self, client: TestClient, random_user):
        response = await client.put(f'/api/v1/users/{random_user.id}', json={"role": "admin"},
                                    headers=auth(random_user))

        assert response.status == 403
        assert not (await User.get(id=random_user.id)).is_admin

    async def test_delete_user(self, client: TestClient, random_admin, random_user):
        """Assert that deleting a user deactivates them."""
        response = await client.delete(f'/api/v1/users/{random_user.id}', headers=auth(random_admin))

        assert response.status == 200
        assert not (await User.get(id=random_user.id)).is_active

        response = await client.get('/api/v1/rides/active', headers=auth(random_user))
        assert response.status == 403


class TestUserRidesView:

    async def test_get_rides(self, client: TestClient, ride_manager, random_user, random_cycle, random_station):
        await ride_manager.start(random_user, random_cycle.identifier, random_station.id)
        await ride_manager.finish(random_user, random_cycle.identifier, random_station.id)

        response_schema = EnvelopeSchema.of(rides=Many(RideSchema()), pagination=PaginationInfoSchema())
        response = await client.get(f'/api/v1/users/{random_user.id}/rides', headers=auth(random_user))

        response_data = response_schema.load(await response.json())["data"]
        assert len(response_data["rides"]) == 1
        assert response_data["rides"][0]["user_url"] == f"/api/v1/users/{random_user.id}"


class TestUserStatsView:

    async def test_get_stats(self, client: TestClient, random_user):
        response_schema = EnvelopeSchema.of(user=UserSummarySchema(), stats=RideStatsSchema())
        response = await client.get(f'/api/v1/users/{random_user.id}/stats', headers=auth(random_user))

        response_data = response_schema.load(await response.json())["data"]
        assert response_data["user"]["id"] == random_user.id
        assert response_data["stats"]["total_rides"] == 0


class TestUserRideCancelView:

    async def test_admin_cancels_ride(self, client: TestClient, random_admin, random_ride, random_user,
                                      ride_manager):
        response = await client.post(f'/api/v1/users/{random_user.id}/rides/cancel', headers=auth(random_admin))

        assert response.status == 200
        assert not await ride_manager.has_active_ride(random_user)

    async def test_admin_cancels_no_ride(self, client: TestClient, random_admin, random_user):
        response = await client.post(f'/api/v1/users/{random_user.id}/rides/cancel', headers=auth(random_admin))
        assert response.status == 400


class TestMeView:

    async def test_me_redirects(self, client: TestClient, random_user):
        """Assert that the me url resolves to the authenticated user."""
        response = await client.get('/api/v1/users/me/stats', headers=auth(random_user), allow_redirects=False)

        assert response.status == 307
        assert response.headers["Location"] == f"/api/v1/users/{random_user.id}/stats"

    async def test_me_without_tail(self, client: TestClient, random_user):
        response = await client.get('/api/v1/users/me', headers=auth(random_user), allow_redirects=False)

        assert response.status == 307
        assert response.headers["Location"] == f"/api/v1/users/{random_user.id}"

    async def test_me_unregistered(self, client: TestClient, database):
        response = await client.get('/api/v1/users/me', headers={"Authorization": "Bearer deadbeef"})

        assert response.status == 404
        response_data = await response.json()
        assert response_data["data"] == {"url": "/api/v1/users", "method": "POST"}
