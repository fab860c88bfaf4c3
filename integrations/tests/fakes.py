# integrations/tests/fakes.py

import io
import json


class FakeSheetsClient:
    """Records writes; column A of each month tab comes from `days`."""

    def __init__(self, days=None):
        self.days = days or {}
        self.batches = []
        self.cells = {}

    def get_values(self, cell_range):
        tab = cell_range.split("!", 1)[0]
        return [[value] for value in self.days.get(tab, [])]

    def update_cell(self, cell_range, value):
        self.cells[cell_range] = value

    def batch_update(self, updates):
        self.batches.append(dict(updates))


class FakeResponse(io.BytesIO):
    def __init__(self, payload):
        super().__init__(json.dumps(payload).encode("utf-8"))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
