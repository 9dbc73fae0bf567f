# tools/simulate_inputs.py

import argparse
import json
from pathlib import Path

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from simulator.evaluator import evaluate_inputs, summarize
from tools.machine_loader import load_machine_file

EMPTY_INPUT = '""'


# === Utility Loaders ===
def load_input_pool(pool_file):
    """
    One input per line. Only the line terminator is removed, since a space can be an input symbol.
    Empty lines are skipped and a line holding only "" is the empty input.
    """
    with open(pool_file, "r", encoding="utf-8", newline="") as f:
        lines = [line.rstrip("\r\n") for line in f]
    return ["" if line == EMPTY_INPUT else line for line in lines if line]


def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []


def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)


# === Promotion for Long-Runners ===
def promote_long_runners(input_strings, pool_file):
    """Queue inputs that hit the step bound so they can be re-run with a larger one."""
    if not input_strings:
        return
    Path(pool_file).parent.mkdir(parents=True, exist_ok=True)
    with open(pool_file, "a", encoding="utf-8") as f:
        for input_string in input_strings:
            f.write((input_string or EMPTY_INPUT) + "\n")


def console_message(msg):
    print(f"[simulate_inputs] {msg}")


# === Main Simulation Runner ===
def simulate_inputs(definition, pool_file, output_name="results", results_root="results", batch_size=256, max_steps=10000):
    pool_name = Path(pool_file).stem
    results_folder = Path(results_root) / pool_name
    results_folder.mkdir(parents=True, exist_ok=True)
    results_file = results_folder / f"{output_name}.jsonl"
    checkpoint_file = results_folder / f"{output_name}_checkpoint.json"
    long_runner_file = Path(pool_file).with_name(f"{pool_name}_long_runners.txt")

    all_inputs = load_input_pool(pool_file)
    completed = load_checkpoint(checkpoint_file)
    done = set(completed)

    pending_inputs = [s for s in dict.fromkeys(all_inputs) if s not in done]
    console_message(f"Loaded {len(all_inputs):,} total inputs. {len(pending_inputs):,} pending.")

    all_entries = []
    with open(results_file, "a", encoding="utf-8") as results_fh:
        for batch_start in range(0, len(pending_inputs), batch_size):
            batch = pending_inputs[batch_start:batch_start + batch_size]
            console_message(f"Processing batch {batch_start // batch_size + 1} with {len(batch):,} inputs...")

            with Progress(
                    SpinnerColumn(),
                    BarColumn(),
                    "[progress.percentage]{task.percentage:>3.0f}%",
                    TextColumn("{task.completed}/{task.total} Inputs"),
                    TimeElapsedColumn()
            ) as progress:

                task = progress.add_task("[cyan]Simulating...", total=len(batch))
                batch_lines = []
                long_runners = []

                for input_string in batch:
                    entry = evaluate_inputs(definition, [input_string], max_steps=max_steps)[0]
                    all_entries.append(entry)

                    record = {"input": input_string, "error": entry["error"]}
                    if entry["result"] is not None:
                        record.update(entry["result"].to_dict())
                        if not entry["result"].halted:
                            long_runners.append(input_string)
                    batch_lines.append(record)
                    completed.append(input_string)

                    progress.update(task, advance=1)

                # === Bulk write once per batch ===
                for record in batch_lines:
                    results_fh.write(json.dumps(record) + "\n")
                results_fh.flush()
                promote_long_runners(long_runners, long_runner_file)

                save_checkpoint(completed, checkpoint_file)
                console_message("Batch completed. Checkpoint saved.")

    summary = summarize(all_entries)
    console_message(f"All inputs simulated. Results saved to {results_file}")
    return summary


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Run a Turing machine over a pool of input strings with checkpointing.")
    parser.add_argument("--machine", required=True, help="Path to a machine JSON file")
    parser.add_argument("--pool", required=True, help="Path to input pool file (one input per line)")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--results_dir", default="results", help="Root folder for result files")
    parser.add_argument("--batch_size", type=int, default=256, help="Inputs per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=10000, help="Maximum steps before timeout")
    args = parser.parse_args()

    definition = load_machine_file(args.machine)
    summary = simulate_inputs(
        definition,
        args.pool,
        args.output,
        results_root=args.results_dir,
        batch_size=args.batch_size,
        max_steps=args.max_steps,
    )
    print(json.dumps(summary, indent=4))

if __name__ == "__main__":
    main()
