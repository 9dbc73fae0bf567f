# tools/machine_inspect.py

import argparse

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tools.machine_loader import load_machine_file

console = Console()


def _ordered_states(definition):
    """Initial state first, then working states, then accept and reject states."""
    halting = definition.accept_states | definition.reject_states
    working = sorted(definition.states - halting - {definition.initial_state})
    head = [definition.initial_state]
    return head + working + sorted(definition.accept_states - set(head)) + sorted(definition.reject_states - set(head))


def _ordered_symbols(definition):
    others = sorted(definition.tape_alphabet - {definition.blank_symbol})
    return others + [definition.blank_symbol]


def transition_rows(definition):
    """One row per state: [state, action per tape symbol]. Actions read 'write move next'."""
    rows = []
    for state in _ordered_states(definition):
        row = [state]
        for symbol in _ordered_symbols(definition):
            transition = definition.transitions.lookup(state, symbol)
            if transition is None:
                row.append("HALT")
            else:
                row.append(f"{transition.write_symbol} {transition.direction.value} {transition.next_state}")
        rows.append(row)
    return rows


def build_transition_table(definition, title="Transition Table"):
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("State/Symbol", justify="left")
    for symbol in _ordered_symbols(definition):
        table.add_column(escape(symbol), justify="center")

    for row in transition_rows(definition):
        state = row[0]
        name = escape(state)
        if definition.is_accepting(state):
            label = f"[green]{name} (accept)[/green]"
        elif definition.is_rejecting(state):
            label = f"[red]{name} (reject)[/red]"
        elif state == definition.initial_state:
            label = f"[cyan]{name} (start)[/cyan]"
        else:
            label = name
        table.add_row(label, *[escape(cell) for cell in row[1:]])
    return table


def print_machine_summary(definition):
    console.print(f"  States: {len(definition.states)}")
    console.print(f"  Input alphabet: {', '.join(sorted(definition.alphabet))}")
    console.print(f"  Tape alphabet: {', '.join(sorted(definition.tape_alphabet))}")
    console.print(f"  Blank symbol: {definition.blank_symbol}")
    console.print(f"  Transitions: {len(definition.transitions)}")
    console.print(build_transition_table(definition))


def main():
    parser = argparse.ArgumentParser(description="Turing Machine Transition Inspector")
    parser.add_argument("--machine", required=True, help="Path to a machine JSON file, e.g., machines/even_ones.json")
    args = parser.parse_args()

    definition = load_machine_file(args.machine)
    print(f"[INFO] Machine {args.machine}")
    print_machine_summary(definition)

if __name__ == "__main__":
    main()
