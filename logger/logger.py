import json
import os
from datetime import datetime, timezone

class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="turing_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def _timestamp(self):
        return datetime.now(timezone.utc).isoformat()

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")

    def log_run(self, machine_name: str, input_string: str, result):
        """Log one execution result; runs that hit the step bound also go to the non-halting log."""
        entry = {
            "timestamp": self._timestamp(),
            "machine": machine_name,
            "input": input_string,
        }
        entry.update(result.to_dict())
        self.log(entry)
        if not result.halted:
            self.log_non_halting([entry])
        return entry

    def log_error(self, machine_name: str, input_string, error: Exception):
        """Log a definition or input error."""
        entry = {
            "timestamp": self._timestamp(),
            "machine": machine_name,
            "input": input_string,
            "error_type": type(error).__name__,
            "error": str(error),
        }
        self._log_to_file(f"errors_{self.today}.jsonl", [entry])
        return entry

    def log_non_halting(self, entries: list):
        """Log runs that did not halt within the step bound."""
        filename = f"non_halting_{self.today}.jsonl"
        self._log_to_file(filename, entries)
