from locust import HttpUser, task, between
import random

# Addresses dari file (satu per baris); fallback ke alamat acak
try:
    with open("addresses.txt") as f:
        addresses = [line.strip() for line in f if line.strip()]
except FileNotFoundError:
    addresses = ["0x" + "".join(random.choices("0123456789abcdef", k=40)) for _ in range(50)]


class TZInferUser(HttpUser):
    wait_time = between(1, 2)

    @task(3)
    def timezone_batch(self):
        # ambil random 5 address tiap request
        sample = random.sample(addresses, min(5, len(addresses)))

        self.client.post(
            "/api/timezone",
            json={"addresses": sample}
        )

    @task(1)
    def timezone_cached(self):
        # batch tetap -> cache hit setelah request pertama
        self.client.post(
            "/api/timezone",
            json={"addresses": addresses[:3]},
            name="/api/timezone (cached)",
        )

    @task(1)
    def health(self):
        self.client.get("/health")
