import random
from locust import HttpUser, task, between, events
from locust.runners import WorkerRunner

BASE_URL = "http://127.0.0.1:3001"
COLLECTION = "products"

SAMPLE_PRODUCTS = [
    {"title": "Apple iPhone 13", "description": "128GB smartphone", "price": 699},
    {"title": "Samsung Galaxy S22", "description": "Android phone", "price": 549},
    {"title": "Dell XPS 13", "description": "Ultrabook laptop", "price": 1199},
    {"title": "Nintendo Switch", "description": "Hybrid gaming console", "price": 299},
    {"title": "Sony WH-1000XM4", "description": "Noise cancelling headphones", "price": 278},
    {"title": "Canon EOS R50", "description": "Mirrorless camera for photo and video", "price": 679},
]

NATURAL_QUERIES = [
    "iPhone under $500",
    "gaming console",
    "laptop between 800 and 1500",
    "sony headphones over 200",
    "mirrorless camera",
    "cheap android phone below 300",
    "vintage leather jacket",
]

@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("=" * 60)
    print("Load test setup...")
    print("=" * 60)

    if not isinstance(environment.runner, WorkerRunner):
        import requests

        try:
            response = requests.post(
                f"{BASE_URL}/api/count",
                json={"collection": COLLECTION},
                timeout=10
            )
            count = response.json().get("count", 0) if response.status_code == 200 else 0
            if count == 0:
                response = requests.post(
                    f"{BASE_URL}/api/add",
                    json={"collection": COLLECTION, "data": SAMPLE_PRODUCTS},
                    timeout=10
                )
                print(f"Seeded {COLLECTION}: {response.status_code}")
            else:
                print(f"{COLLECTION} already holds {count} documents")
        except Exception as e:
            print(f"Seeding failed: {e}")

        print("=" * 60)


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    print("\n" + "=" * 60)
    print("Load test finished")
    print("=" * 60)


class SearchUser(HttpUser):

    wait_time = between(1, 3)

    host = BASE_URL

    @task(10)
    def ai_search(self):
        query = random.choice(NATURAL_QUERIES)

        with self.client.post(
                "/api/search/ai",
                json={"collection": COLLECTION, "query": query, "limit": 10},
                catch_response=True,
                name="POST /search/ai (natural language)"
        ) as response:
            if response.status_code != 200:
                response.failure(f"Status code: {response.status_code}")
                return
            try:
                data = response.json()
            except ValueError:
                response.failure("Invalid JSON response")
                return
            if data.get("fallback"):
                response.failure("Fell back to keyword search")
            else:
                response.success()

    @task(5)
    def raw_search(self):
        price = random.choice([300, 500, 1000])

        with self.client.post(
                "/api/search",
                json={"collection": COLLECTION, "query": {"price": {"$lt": price}}},
                catch_response=True,
                name="POST /search (mongo query)"
        ) as response:
            if response.status_code == 200:
                response.success()
            else:
                response.failure(f"Status code: {response.status_code}")

    @task(2)
    def count(self):
        self.client.post("/api/count", json={"collection": COLLECTION}, name="POST /count")

    @task(1)
    def list_collections(self):
        self.client.get("/api/collections", name="GET /collections")


class HealthChecker(HttpUser):

    wait_time = between(2, 5)
    host = BASE_URL

    weight = 1

    @task
    def health(self):
        self.client.get("/api/health", name="GET /health")

SearchUser.weight = 9
