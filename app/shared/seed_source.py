import requests
import logging


class SeedSource:
    def __init__(self, url):
        """Remote JSON document holding the seed transactions"""
        self.url = url

    def fetch(self):
        """Download the seed payload and return it as a list of records"""
        logging.info(f"Fetching seed data from {self.url}")
        response = requests.get(self.url, headers={"Accept": "application/json"})
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(f"Seed payload must be a JSON array, got {type(payload).__name__}")
        return payload
