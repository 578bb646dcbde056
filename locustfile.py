from locust import HttpUser, task, between
import os, random, requests

API_PATH = os.getenv("STOREFRONT_API_PATH", "/order-service/v1")
ORDER_SERVICE = os.getenv("STOREFRONT_BASE_URL", "http://localhost:8000")

CATALOG = []


class Shopper(HttpUser):
    wait_time = between(0.01, 0.1)

    def on_start(self):
        # Preload item ids for variety
        try:
            r = requests.get(f"{ORDER_SERVICE}{API_PATH}/items", timeout=3)
            if r.ok:
                global CATALOG
                CATALOG = [i["id"] for i in r.json() if i["stock"] > 0]
        except requests.RequestException:
            pass

    @task(3)
    def browse(self):
        self.client.get(f"{API_PATH}/items")

    @task(5)
    def buy(self):
        item_id = random.choice(CATALOG) if CATALOG else random.randint(1, 2)
        qty = random.choice([1, 1, 1, 2])  # mostly 1
        with self.client.post(f"{API_PATH}/purchase", json={"itemId": item_id, "quantity": qty},
                              catch_response=True) as r:
            bought = r.ok
            # sold out is an expected answer under load
            if r.status_code == 409:
                r.success()
        if bought:
            # the storefront reloads after every successful purchase
            self.client.get(f"{API_PATH}/items")

    @task(1)
    def check_stock(self):
        item_id = random.choice(CATALOG) if CATALOG else 1
        self.client.get("/orders/check-stock", params={"productId": item_id})
