from locust import HttpUser, task, between
import os
import json
import random
import time


class AnalystUser(HttpUser):
    """Locust user that authenticates via JWT before running tasks."""

    wait_time = between(0.5, 2.5)

    def on_start(self):
        self.token = None
        self.headers = {"Content-Type": "application/json"}
        self.customer_ids = [f"CUST{i:05d}" for i in range(1, int(os.getenv("LOCUST_CUSTOMERS", "50")) + 1)]
        self.campaign_ids = [f"CAMP{i:04d}" for i in range(1, int(os.getenv("LOCUST_CAMPAIGNS", "10")) + 1)]

        email = os.getenv("LOCUST_EMAIL")
        password = os.getenv("LOCUST_PASSWORD", "testpass123")

        if email:
            login_payload = json.dumps({"email": email, "password": password})
            with self.client.post(
                "/api/v1/auth/login/",
                data=login_payload,
                headers=self.headers,
                catch_response=True,
            ) as resp:
                if resp.status_code == 200:
                    self._use_token(resp.json()["tokens"]["access"])
                    resp.success()
                    return

        # Fallback: register a unique user for this Locust instance
        ts = int(time.time() * 1000)
        reg_payload = json.dumps({
            "email": f"locust-{ts}@test.com",
            "username": f"locustuser{ts}",
            "password": password,
        })
        with self.client.post(
            "/api/v1/auth/register/",
            data=reg_payload,
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                self._use_token(resp.json()["tokens"]["access"])
                resp.success()
            else:
                resp.failure(f"Register failed: {resp.status_code}")

    def _use_token(self, token):
        self.token = token
        self.headers["Authorization"] = f"Bearer {token}"

    @task(3)
    def dashboard(self):
        self.client.get("/api/v1/analytics/dashboard/", headers=self.headers)

    @task(2)
    def daily_revenue(self):
        self.client.get("/api/v1/analytics/dashboard/daily-revenue/", headers=self.headers)

    @task(3)
    def churn_prediction(self):
        payload = json.dumps({
            "customer_id": random.choice(self.customer_ids),
            "prediction_type": random.choice(["churn", "ltv", "next_purchase"]),
        })
        with self.client.post("/api/v1/analytics/prediction/", data=payload, headers=self.headers,
                              name="/api/v1/analytics/prediction/", catch_response=True) as resp:
            # Unknown customers are a valid answer when the seed is smaller than the id range
            if resp.status_code in (200, 404):
                resp.success()

    @task(2)
    def advanced_ltv(self):
        customer_id = random.choice(self.customer_ids)
        with self.client.get(f"/api/v1/analytics/predictions/{customer_id}/ltv/", headers=self.headers,
                             name="/api/v1/analytics/predictions/[id]/ltv/", catch_response=True) as resp:
            if resp.status_code in (200, 404):
                resp.success()

    @task(2)
    def optimize_campaign(self):
        payload = json.dumps({
            "campaign_id": random.choice(self.campaign_ids),
            "objective": random.choice(["maximize_roas", "minimize_cost", "maximize_conversions"]),
        })
        with self.client.post("/api/v1/analytics/optimization/", data=payload, headers=self.headers,
                              catch_response=True) as resp:
            if resp.status_code in (200, 404):
                resp.success()

    @task(1)
    def segmentation(self):
        self.client.post("/api/v1/analytics/segmentation/", data=json.dumps({}), headers=self.headers)

    @task(1)
    def list_customers(self):
        self.client.get("/api/v1/customers/?limit=50", headers=self.headers)

    @task(1)
    def import_templates(self):
        self.client.get("/api/v1/import/templates/")

    @task(1)
    def health(self):
        self.client.get("/health/")


# Useful for headless CSV output: `locust --headless -u 50 -r 5 -t 2m -f locustfile.py --csv out --host http://localhost:8070`
