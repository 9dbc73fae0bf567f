# tools/machine_loader.py

import json
from dataclasses import dataclass, field
from pathlib import Path

from simulator.machine import DefinitionError, validate


@dataclass
class ExampleMachine:
    key: str
    display_name: str
    definition: object
    sample_inputs: list = field(default_factory=list)


# === Fallback Machines (used when the machines folder is empty) ===
BUILTIN_MACHINES = {
    "even_ones": {
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
            "q0,_": ["accept", "_", "R"],
            "q1,0": ["q1", "0", "R"],
            "q1,1": ["q0", "1", "R"],
            "q1,_": ["reject", "_", "R"],
        },
        "sample_inputs": ["", "0", "1", "11", "101", "111", "0101", "1111"],
    },
    "accept_all": {
        "states": ["q0", "accept"],
        "alphabet": ["0", "1"],
        "tape_alphabet": ["0", "1", "_"],
        "initial_state": "q0",
        "accept_states": ["accept"],
        "reject_states": [],
        "blank_symbol": "_",
        "transitions": {
            "q0,0": ["q0", "0", "R"],
            "q0,1": ["q0", "1", "R"],
            "q0,_": ["accept", "_", "R"],
        },
        "sample_inputs": ["", "0", "111", "01010"],
    },
    "a_plus_b_plus": {
        "states": ["q0", "q1", "q2", "accept", "reject"],
        "alphabet": ["a", "b"],
        "tape_alphabet": ["a", "b", "_"],
        "initial_state": "q0",
        "accept_states": ["accept"],
        "reject_states": ["reject"],
        "blank_symbol": "_",
        "transitions": {
            "q0,a": ["q1", "a", "R"],
            "q1,a": ["q1", "a", "R"],
            "q1,b": ["q2", "b", "R"],
            "q2,b": ["q2", "b", "R"],
            "q2,_": ["accept", "_", "R"],
            "q2,a": ["reject", "a", "R"],
        },
        "sample_inputs": ["ab", "aabb", "aaabbb", "a", "ba", "aba"],
    },
}


def _reject_duplicate_keys(pairs):
    """object_pairs_hook: a repeated key (e.g. two "q0,1" transitions) would silently overwrite."""
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise DefinitionError(f"Duplicate key in machine description: {key}", key)
        obj[key] = value
    return obj


def parse_machine_json(json_str):
    """Decode a JSON machine description and validate it. Returns (definition, raw)."""
    try:
        raw = json.loads(json_str, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as e:
        raise DefinitionError(f"Invalid JSON: {e}") from e
    return validate(raw), raw


def load_machine_file(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Machine file not found at: {path}")
    with open(path, "r", encoding="utf-8") as f:
        definition, _ = parse_machine_json(f.read())
    return definition


def format_display_name(filename):
    """even_ones -> Even Ones"""
    return " ".join(word[:1].upper() + word[1:] for word in filename.replace("_", " ").split())


def _sample_inputs(raw):
    samples = raw.get("sample_inputs", [""])
    return [s for s in samples if isinstance(s, str)]


def load_example_machines(directory="machines/"):
    """Load every *.json machine in a directory, skipping files that do not load."""
    examples = {}
    directory = Path(directory)
    if not directory.is_dir():
        return examples

    for path in sorted(directory.glob("*.json")):
        try:
            with open(path, "r", encoding="utf-8") as f:
                definition, raw = parse_machine_json(f.read())
        except (OSError, DefinitionError):
            continue
        examples[path.stem] = ExampleMachine(
            key=path.stem,
            display_name=format_display_name(path.stem),
            definition=definition,
            sample_inputs=_sample_inputs(raw),
        )
    return examples


def builtin_machines():
    return {
        key: ExampleMachine(
            key=key,
            display_name=format_display_name(key),
            definition=validate(raw),
            sample_inputs=_sample_inputs(raw),
        )
        for key, raw in BUILTIN_MACHINES.items()
    }


def available_machines(directory="machines/"):
    """Machines from the folder, or the built-in set when the folder has none."""
    return load_example_machines(directory) or builtin_machines()
