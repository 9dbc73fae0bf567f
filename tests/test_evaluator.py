import pytest

from simulator.evaluator import evaluate_inputs, summarize
from simulator.machine import validate
from simulator.turing_machine import Outcome
from tools.machine_loader import BUILTIN_MACHINES


@pytest.fixture
def even_ones():
    return validate(BUILTIN_MACHINES["even_ones"])


class TestEvaluateInputs:

    def test_results_in_input_order(self, even_ones):
        entries = evaluate_inputs(even_ones, ["11", "1", ""], max_steps=100)
        assert [e["input"] for e in entries] == ["11", "1", ""]
        assert [e["result"].outcome for e in entries] == [Outcome.ACCEPTED, Outcome.REJECTED, Outcome.ACCEPTED]
        assert all(e["error"] is None for e in entries)

    def test_invalid_input_becomes_error_entry(self, even_ones):
        entries = evaluate_inputs(even_ones, ["0", "0x0", "1"], max_steps=100)
        assert entries[1]["result"] is None
        assert "Invalid input symbol" in entries[1]["error"]
        assert entries[2]["result"].outcome is Outcome.REJECTED


class TestSummarize:

    def test_counts_and_step_stats(self, even_ones):
        # steps: "" -> 1, "11" -> 3, "1" -> 2, "0000" -> 5
        entries = evaluate_inputs(even_ones, ["", "11", "1", "0000", "z"], max_steps=100)
        summary = summarize(entries)
        assert summary["total"] == 5
        assert summary["errors"] == 1
        assert summary["outcomes"] == {"accepted": 3, "rejected": 1, "did_not_halt": 0}
        assert summary["steps"]["max"] == 5
        assert summary["steps"]["mean"] == pytest.approx(2.75)
        assert summary["steps"]["median"] == pytest.approx(2.5)

    def test_empty_summary(self):
        summary = summarize([])
        assert summary["total"] == 0
        assert summary["steps"] == {"mean": 0.0, "median": 0.0, "max": 0}

    def test_did_not_halt_counted(self, even_ones):
        summary = summarize(evaluate_inputs(even_ones, ["0000000"], max_steps=3))
        assert summary["outcomes"]["did_not_halt"] == 1
        assert summary["steps"]["max"] == 3
