import numpy as np

from simulator.turing_machine import InputValidationError, Outcome, run


def evaluate_inputs(definition, inputs, max_steps=10000):
    """
    Run one definition against many inputs.
    Inputs outside the alphabet are reported as error entries, the rest carry their result.
    """
    entries = []
    for input_string in inputs:
        try:
            result = run(definition, input_string, max_steps)
        except InputValidationError as e:
            entries.append({"input": input_string, "result": None, "error": str(e)})
            continue
        entries.append({"input": input_string, "result": result, "error": None})
    return entries


def summarize(entries):
    results = [entry["result"] for entry in entries if entry["result"] is not None]
    counts = {outcome.value: 0 for outcome in Outcome}
    for result in results:
        counts[result.outcome.value] += 1

    steps = np.array([result.steps for result in results], dtype=np.int64)
    if steps.size:
        step_stats = {
            "mean": float(steps.mean()),
            "median": float(np.median(steps)),
            "max": int(steps.max()),
        }
    else:
        step_stats = {"mean": 0.0, "median": 0.0, "max": 0}

    return {
        "total": len(entries),
        "errors": len(entries) - len(results),
        "outcomes": counts,
        "steps": step_stats,
    }
