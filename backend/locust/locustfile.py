"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Duplicate applications and racing transitions
  locust -f locustfile.py --tags throughput   # Open-events cache
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

# Shared state
EVENT_IDS = []
BOOKING_IDS = []
PLANNER_HEADERS = {}
CONCURRENCY_EVENT_ID = None

PASSWORD = "loadtest-password"


def random_email(prefix: str) -> str:
    return f"{prefix}_{random.randint(100000, 999999)}@load.example.com"


def sign_up_and_in(client, user_type: str) -> dict:
    email = random_email(user_type)
    client.post("/api/v1/auth/signup", json={
        "email": email,
        "password": PASSWORD,
        "full_name": f"Load {user_type.title()}",
        "user_type": user_type,
    })
    resp = client.post("/api/v1/auth/signin", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def event_payload(days_ahead: int) -> dict:
    return {
        "title": f"Load Event {random.randint(1, 10000)}",
        "description": "Load test event",
        "venue_address": "Test Venue",
        "event_date": (date.today() + timedelta(days=days_ahead)).isoformat(),
        "start_time": "18:00:00",
        "end_time": "23:00:00",
        "ushers_needed": 10,
        "pay_rate": 50,
    }


def create_published_event(client, headers: dict, days_ahead: int = 30):
    resp = client.post("/api/v1/events/", json=event_payload(days_ahead), headers=headers)
    if resp.status_code != 201:
        return None
    event_id = resp.json()["id"]
    client.post(f"/api/v1/events/{event_id}/status", json={"status": "published"}, headers=headers)
    return event_id


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: planner and published event are created by the first user")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - every usher applies to the same event, repeatedly

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify one row per usher:
      SELECT usher_id, COUNT(*) FROM bookings WHERE event_id = X
      GROUP BY usher_id HAVING COUNT(*) > 1;
    Should return nothing. Completing a booking twice should never bump
    usher_profiles.total_events twice.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONCURRENCY_EVENT_ID
        if not PLANNER_HEADERS:
            PLANNER_HEADERS.update(sign_up_and_in(self.client, "planner"))
        if not CONCURRENCY_EVENT_ID and PLANNER_HEADERS:
            CONCURRENCY_EVENT_ID = create_published_event(self.client, PLANNER_HEADERS)
            print(f"\nCreated event {CONCURRENCY_EVENT_ID}\n")
        self.headers = sign_up_and_in(self.client, "usher")

    @tag("concurrency")
    @task(5)
    def apply_same_event(self):
        """The first apply wins; every repeat must be a 409."""
        if not CONCURRENCY_EVENT_ID or not self.headers:
            return

        with self.client.post("/api/v1/bookings/",
            json={"event_id": CONCURRENCY_EVENT_ID},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                BOOKING_IDS.append(resp.json()["id"])
                resp.success()
            elif resp.status_code == 409:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("concurrency")
    @task(2)
    def race_transitions(self):
        """Planner accepts and completes the same booking from many users at once."""
        if not BOOKING_IDS or not PLANNER_HEADERS:
            return

        booking_id = random.choice(BOOKING_IDS)
        for status in ("accepted", "completed"):
            with self.client.post(f"/api/v1/bookings/{booking_id}/status",
                json={"status": status},
                headers=PLANNER_HEADERS,
                name="/api/v1/bookings/{id}/status",
                catch_response=True
            ) as resp:
                # 400 or 409 means someone else already moved it
                if resp.status_code in (200, 400, 409):
                    resp.success()
                else:
                    resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_open_events(self):
        limit = random.choice([5, 10, 20])
        resp = self.client.get(f"/api/v1/events/?limit={limit}", name="/api/v1/events/ [cached]")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = sign_up_and_in(self.client, "usher")

    def expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_event(self):
        with self.client.post("/api/v1/bookings/",
            json={"event_id": "00000000-0000-0000-0000-000000000000"},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, (404,))

    @tag("edge")
    @task
    def malformed_event_id(self):
        with self.client.post("/api/v1/bookings/",
            json={"event_id": 999999},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, (422,))

    @tag("edge")
    @task
    def unknown_status(self):
        if not BOOKING_IDS:
            return
        with self.client.post(f"/api/v1/bookings/{random.choice(BOOKING_IDS)}/status",
            json={"status": "approved"},
            headers=self.headers,
            name="/api/v1/bookings/{id}/status [bad]",
            catch_response=True
        ) as resp:
            self.expect(resp, (400, 403))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True
        ) as resp:
            self.expect(resp, (400, 422))

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings/",
            json={"event_id": "00000000-0000-0000-0000-000000000000"},
            catch_response=True
        ) as resp:
            self.expect(resp, (401,))


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some applications
      - Rare event posts by planners
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.user_type = "planner" if random.random() < 0.1 else "usher"
        self.headers = sign_up_and_in(self.client, self.user_type)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/v1/events/?limit=20")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(20)
    def view_dashboard(self):
        if self.headers:
            self.client.get(f"/api/v1/dashboard/{self.user_type}", headers=self.headers,
                name="/api/v1/dashboard/{role}")

    @task(10)
    def apply(self):
        if EVENT_IDS and self.headers and self.user_type == "usher":
            self.client.post("/api/v1/bookings/",
                json={"event_id": random.choice(EVENT_IDS)},
                headers=self.headers)

    @task(3)
    def post_event(self):
        if self.headers and self.user_type == "planner":
            event_id = create_published_event(self.client, self.headers, random.randint(1, 90))
            if event_id:
                EVENT_IDS.append(event_id)
