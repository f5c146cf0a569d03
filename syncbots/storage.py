"""Persistent ban counter stored as a small JSON file."""

import json
import logging
import os


class BanCounter:
    def __init__(self, path, total_bans=0):
        self.path = path
        self.total_bans = total_bans

    @classmethod
    def load(cls, path):
        if not os.path.exists(path):
            return cls(path)
        try:
            with open(path, "r") as file:
                data = json.load(file)
            total_bans = int(data.get("totalBans", 0))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to load {path}: {e}")
            return cls(path)
        logging.info(f"Loaded {path} ({total_bans} bans)")
        return cls(path, max(total_bans, 0))

    def save(self):
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w") as file:
                json.dump({"totalBans": self.total_bans}, file)
        except OSError as e:
            logging.error(f"Failed to save {self.path}: {e}")

    def increment(self):
        self.total_bans += 1
        self.save()
        return self.total_bans
