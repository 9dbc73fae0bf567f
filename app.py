# app.py

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, IntPrompt, Confirm
from rich.table import Table

from config.config_loader import DEFAULT_CONFIG_PATH, load_config, save_config
from logger.logger import JSONLogger
from simulator.machine import DefinitionError
from simulator.turing_machine import InputValidationError, Outcome, run, trace
from tools.machine_inspect import build_transition_table, print_machine_summary
from tools.machine_loader import available_machines, load_machine_file, parse_machine_json
from tools.simulate_inputs import simulate_inputs

console = Console()

HELP_TEXT = """
A Turing machine is defined using JSON with the following structure:

{
    "states": ["q0", "q1", "accept", "reject"],
    "alphabet": ["0", "1"],
    "tape_alphabet": ["0", "1", "_"],
    "initial_state": "q0",
    "accept_states": ["accept"],
    "reject_states": ["reject"],
    "blank_symbol": "_",
    "transitions": {
        "q0,0": ["q0", "0", "R"],
        "q0,1": ["q1", "1", "R"],
        "q1,_": ["accept", "_", "R"]
    }
}

Transition format: "state,symbol": [new_state, write_symbol, direction]
Direction: "L" (left), "R" (right)
A missing transition halts the machine and rejects the input.

The program will:
1. Execute the machine on your input string
2. Report if it ACCEPTS or REJECTS (halts), or DID NOT HALT within the step bound
3. Show the final state reached
"""

# === Utilities ===
def load_runtime_config(path=DEFAULT_CONFIG_PATH):
    try:
        return load_config(path, verbose=False)
    except FileNotFoundError:
        console.print(f"[red]Error: {escape(str(path))} not found![/red]")
        sys.exit(1)

def make_logger(config):
    if not config.get("log_runs", True):
        return None
    return JSONLogger(config["output_directory"], config["log_file_prefix"])

def describe_result(result):
    if result.outcome is Outcome.ACCEPTED:
        return f"ACCEPTS (state: {result.final_state}, steps: {result.steps})"
    if result.outcome is Outcome.REJECTED:
        return f"REJECTS (state: {result.final_state}, steps: {result.steps})"
    return f"DID NOT HALT (state: {result.final_state}, steps: {result.steps})"

def show_result(input_string, result):
    console.print("\n" + "-" * 60)
    console.print("[bold]EXECUTION RESULTS[/bold]")
    console.print("-" * 60)
    console.print(f"Input string: '{escape(input_string)}'")
    console.print(f"Steps executed: {result.steps}")
    console.print(f"Final state: {escape(result.final_state)}")
    console.print(f"Machine halted: {result.halted}")
    console.print(f"Final tape: '{escape(result.tape)}'")

    if result.outcome is Outcome.ACCEPTED:
        console.print(f"\n[green]✓ RESULT: ACCEPTS (halts in state {escape(result.final_state)})[/green]")
    elif result.outcome is Outcome.REJECTED:
        console.print(f"\n[red]✗ RESULT: REJECTS (final state: {escape(result.final_state)})[/red]")
    else:
        console.print("\n[yellow]? RESULT: DID NOT HALT (possible infinite loop)[/yellow]")
    console.print("-" * 60)

def build_trace_table(history, limit):
    table = Table(title="Step Trace", show_header=True, header_style="bold magenta")
    for column in ["Step", "State", "Head", "Read", "Write", "Move", "Next"]:
        table.add_column(column, justify="center")

    for entry in history[:limit]:
        table.add_row(
            str(entry.step),
            escape(entry.state),
            str(entry.head),
            escape(entry.read_symbol),
            escape(entry.write_symbol),
            entry.direction,
            escape(entry.next_state),
        )
    return table

# === Menu Handlers ===
def show_main_menu():
    console.print("\n[bold cyan]Turing Machine Executor[/bold cyan]")
    console.print("[1] Run Example Machine")
    console.print("[2] Define Custom Machine (JSON)")
    console.print("[3] Load Machine from File")
    console.print("[4] Inspect Machine")
    console.print("[5] Simulate Input Pool")
    console.print("[6] Edit Config")
    console.print("[7] Help")
    console.print("[8] Exit")

def run_machine_session(definition, name, config, logger=None):
    """Prompt for inputs until 'back', running each against the definition."""
    console.print(f"\n[bold]Selected: {escape(name)}[/bold]")
    console.print("-" * 60)

    while True:
        input_string = Prompt.ask("\nEnter input string (or 'back' to return)", default="")
        if input_string.strip().lower() == "back":
            break
        show_trace = Confirm.ask("Show step-by-step trace?", default=False)

        try:
            if show_trace:
                result, history = trace(definition, input_string, config["max_steps"])
                console.print(build_trace_table(history, config["trace_limit"]))
                if len(history) > config["trace_limit"]:
                    console.print(f"[dim]... {len(history) - config['trace_limit']:,} more steps not shown.[/dim]")
            else:
                result = run(definition, input_string, config["max_steps"])
        except InputValidationError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            if logger:
                logger.log_error(name, input_string, e)
            continue

        show_result(input_string, result)
        if logger:
            logger.log_run(name, input_string, result)

def choose_example(config):
    examples = available_machines(config["machines_directory"])
    keys = sorted(examples)

    table = Table(title="Example Machines", show_header=True, header_style="bold magenta")
    table.add_column("Index", justify="center")
    table.add_column("Machine", justify="left")
    table.add_column("States", justify="center")
    for idx, key in enumerate(keys, start=1):
        table.add_row(str(idx), examples[key].display_name, str(len(examples[key].definition.states)))
    console.print(table)

    idx_choice = IntPrompt.ask(f"\nSelect example (1-{len(keys)})")
    if idx_choice < 1 or idx_choice > len(keys):
        console.print("[red]Invalid choice![/red]")
        return None
    return examples[keys[idx_choice - 1]]

def handle_run_example(config, logger):
    example = choose_example(config)
    if example is None:
        return
    run_machine_session(example.definition, example.display_name, config, logger)

def read_json_lines():
    """Collect JSON typed at the prompt until an empty line. Returns None on 'cancel'."""
    lines = []
    while True:
        line = console.input().strip()
        if line.lower() == "cancel":
            return None
        if line.lower() == "help":
            handle_help()
            console.print("Continue entering JSON:")
            continue
        if not line and lines:
            break
        if line:
            lines.append(line)
    return "\n".join(lines)

def handle_custom_machine(config, logger):
    console.print("\n[bold]Define Custom Machine (JSON)[/bold]")
    console.print("Enter JSON definition (type 'help' for format, 'cancel' to abort).")
    console.print("Single or multiple lines; finish with an empty line.")

    json_str = read_json_lines()
    if json_str is None:
        return

    try:
        definition, _ = parse_machine_json(json_str)
    except DefinitionError as e:
        console.print(f"[red]Error creating machine: {escape(str(e))}[/red]")
        if logger:
            logger.log_error("custom", None, e)
        return

    console.print("\n[green]✓ Machine created successfully![/green]")
    console.print(f"States: {len(definition.states)}")
    console.print(f"Transitions: {len(definition.transitions)}")
    run_machine_session(definition, "custom", config, logger)

def prompt_machine_file():
    filename = Prompt.ask("Enter filename (or 'cancel' to abort)")
    if filename.strip().lower() == "cancel":
        return None, None

    try:
        return load_machine_file(filename.strip()), Path(filename.strip()).stem
    except (OSError, DefinitionError) as e:
        console.print(f"[red]Error loading machine: {escape(str(e))}[/red]")
        return None, None

def handle_load_file(config, logger):
    console.print("\n[bold]Load Machine from File[/bold]")
    definition, name = prompt_machine_file()
    if definition is None:
        return

    console.print("\n[green]✓ Machine loaded successfully![/green]")
    console.print(f"States: {len(definition.states)}")
    console.print(f"Transitions: {len(definition.transitions)}")
    run_machine_session(definition, name, config, logger)

def handle_inspect():
    console.print("\n[bold]Inspect Machine[/bold]")
    definition, _ = prompt_machine_file()
    if definition is None:
        return
    print_machine_summary(definition)

def handle_simulate_pool(config):
    console.print("\n[bold]Simulate Input Pool[/bold]")
    definition, _ = prompt_machine_file()
    if definition is None:
        return

    pool_path = Prompt.ask("Input pool file (one input per line)")
    if not Path(pool_path).exists():
        console.print(f"[red]Pool file {escape(pool_path)} not found.[/red]")
        return
    batch_size = IntPrompt.ask("Batch Size", default=256)
    max_steps = IntPrompt.ask("Max Steps", default=config["max_steps"])
    if batch_size <= 0 or max_steps <= 0:
        console.print("[red]Batch size and max steps must be positive.[/red]")
        return

    summary = simulate_inputs(
        definition,
        pool_path,
        "results",
        results_root=config["results_directory"],
        batch_size=batch_size,
        max_steps=max_steps,
    )

    table = Table(title="Pool Summary", show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Inputs", str(summary["total"]))
    table.add_row("Errors", str(summary["errors"]))
    for outcome, count in summary["outcomes"].items():
        table.add_row(outcome, str(count))
    table.add_row("Mean steps", f"{summary['steps']['mean']:.1f}")
    table.add_row("Max steps", str(summary["steps"]["max"]))
    console.print(table)

def handle_edit_config(config, path=DEFAULT_CONFIG_PATH):
    console.print("\n[bold]Edit Configuration[/bold]")

    max_steps = IntPrompt.ask("Max Steps", default=config["max_steps"])
    trace_limit = IntPrompt.ask("Trace rows shown", default=config["trace_limit"])
    machines_directory = Prompt.ask("Machines folder", default=config["machines_directory"])
    log_runs = Confirm.ask("Log runs to JSON lines?", default=config["log_runs"])

    updated = dict(config)
    updated.update({
        "max_steps": max_steps,
        "trace_limit": trace_limit,
        "machines_directory": machines_directory,
        "log_runs": log_runs
    })

    try:
        save_config(updated, path)
    except (TypeError, ValueError) as e:
        console.print(f"[red]Configuration not saved: {escape(str(e))}[/red]")
        return config

    console.print("[green]Configuration updated successfully.[/green]")
    return updated

def handle_help():
    console.print("\n" + "=" * 60)
    console.print("[bold]HELP - Turing Machine Format[/bold]")
    console.print("=" * 60)
    console.print(escape(HELP_TEXT))


def interactive_main(config_path=DEFAULT_CONFIG_PATH):
    config = load_runtime_config(config_path)
    logger = make_logger(config)

    console.print("\nWelcome to the Turing Machine Executor!")
    console.print("Run a machine on an input to see whether it accepts, rejects or fails to halt.")

    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4", "5", "6", "7", "8"], default="8")

        if choice == "1":
            handle_run_example(config, logger)
        elif choice == "2":
            handle_custom_machine(config, logger)
        elif choice == "3":
            handle_load_file(config, logger)
        elif choice == "4":
            handle_inspect()
        elif choice == "5":
            handle_simulate_pool(config)
        elif choice == "6":
            config = handle_edit_config(config, config_path)
            logger = make_logger(config)
        elif choice == "7":
            handle_help()
        elif choice == "8":
            console.print("[bold green]Thank you for using the Turing Machine Executor![/bold green]")
            break

# === CLI Mode for Automation ===
def run_examples(config, logger=None):
    """Run every example machine against its sample inputs."""
    console.print("Turing Machine Executor - Examples\n")
    examples = available_machines(config["machines_directory"])

    for key in sorted(examples):
        example = examples[key]
        console.print("=" * 60)
        console.print(f"Machine: {example.display_name}")
        console.print("=" * 60)
        console.print(build_transition_table(example.definition, title=key))

        for input_string in example.sample_inputs:
            try:
                result = run(example.definition, input_string, config["max_steps"])
            except InputValidationError as e:
                console.print(f"Input: '{escape(input_string)}' -> [red]Error: {escape(str(e))}[/red]")
                continue
            console.print(f"Input: '{escape(input_string)}' -> {escape(describe_result(result))}")
            if logger:
                logger.log_run(key, input_string, result)
        console.print()
    return 0

def cli_main(args):
    config = load_runtime_config(args.config)
    if args.max_steps is not None:
        config["max_steps"] = args.max_steps
    logger = make_logger(config)

    if args.examples:
        return run_examples(config, logger)

    try:
        definition = load_machine_file(args.machine)
    except (OSError, DefinitionError) as e:
        console.print(f"[red]Error loading machine: {escape(str(e))}[/red]")
        return 1

    name = Path(args.machine).stem
    exit_code = 0
    for input_string in args.input or [""]:
        try:
            result = run(definition, input_string, config["max_steps"])
        except InputValidationError as e:
            console.print(f"Input: '{escape(input_string)}' -> [red]Error: {escape(str(e))}[/red]")
            if logger:
                logger.log_error(name, input_string, e)
            exit_code = 1
            continue

        if args.json:
            print(json.dumps({"input": input_string, **result.to_dict()}))
        else:
            console.print(f"Input: '{escape(input_string)}' -> {escape(describe_result(result))}")
        if logger:
            logger.log_run(name, input_string, result)
    return exit_code

def main(argv=None):
    parser = argparse.ArgumentParser(description="Turing Machine Executor")
    parser.add_argument("--examples", action="store_true", help="Run the example machines on their sample inputs")
    parser.add_argument("--machine", help="Path to a machine JSON file to run")
    parser.add_argument("--input", action="append", help="Input string (repeatable, default: empty input)")
    parser.add_argument("--max-steps", type=int, help="Step bound before reporting DID NOT HALT")
    parser.add_argument("--json", action="store_true", help="Print results as JSON lines")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to runtime config JSON")
    args = parser.parse_args(argv)

    if args.max_steps is not None and args.max_steps <= 0:
        parser.error("--max-steps must be a positive integer")
    if (args.input or args.json) and not (args.machine or args.examples):
        parser.error("--input and --json require --machine or --examples")

    if args.examples or args.machine:
        return cli_main(args)
    interactive_main(args.config)
    return 0

if __name__ == "__main__":
    sys.exit(main())
