import random
from locust import HttpUser, task, between, events

BASE_URL = "http://127.0.0.1:8080"

SEARCH_TERMS = ["Health", "Motor", "Travel", "Life", "HLT", "broker"]
STATUSES = ["active", "inactive", "draft"]

search_terms = list(SEARCH_TERMS)


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    global search_terms

    print("=" * 60)
    print("Starting product query load test...")
    print("=" * 60)

    import requests

    try:
        response = requests.get(f"{BASE_URL}/api/v1/products", params={"limit": "50"}, timeout=10)
        if response.status_code == 200:
            names = [p["productName"] for p in response.json().get("data", []) if p.get("productName")]
            search_terms = list(SEARCH_TERMS) + [w for n in names for w in n.split()[:1]]
            print(f"Loaded {len(names)} product names as search terms")
        else:
            print(f"Could not preload products: {response.status_code}")
    except Exception as e:
        print(f"Error preloading products: {e}")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    print("\n" + "=" * 60)
    print("Load test finished")
    print("=" * 60)


class ProductQueryUser(HttpUser):

    wait_time = between(1, 3)

    host = BASE_URL

    def _check(self, response):
        if response.status_code != 200:
            response.failure(f"Status code: {response.status_code}")
            return
        try:
            data = response.json()
        except ValueError:
            response.failure("Invalid JSON response")
            return
        if "data" not in data:
            response.failure("Missing data field")
        else:
            response.success()

    @task(10)
    def list_products(self):
        with self.client.get(
                "/api/v1/products",
                catch_response=True,
                name="GET /products"
        ) as response:
            self._check(response)

    @task(8)
    def search_products(self):
        with self.client.get(
                "/api/v1/products",
                params={"param": random.choice(search_terms)},
                catch_response=True,
                name="GET /products?param"
        ) as response:
            self._check(response)

    @task(5)
    def filter_by_status(self):
        with self.client.get(
                "/api/v1/products",
                params={"status": random.choice(STATUSES)},
                catch_response=True,
                name="GET /products?status"
        ) as response:
            self._check(response)

    @task(3)
    def paginate(self):
        with self.client.get(
                "/api/v1/products",
                params={"page": str(random.randint(1, 5)), "limit": random.choice(["5", "10", "20"])},
                catch_response=True,
                name="GET /products?page&limit"
        ) as response:
            self._check(response)


class HealthCheckUser(HttpUser):

    wait_time = between(2, 5)
    host = BASE_URL

    weight = 1

    @task
    def health(self):
        self.client.get("/api/v1/health", name="GET /health")
