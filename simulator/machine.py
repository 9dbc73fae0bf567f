from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

REQUIRED_FIELDS = [
    "states",
    "alphabet",
    "tape_alphabet",
    "initial_state",
    "accept_states",
    "reject_states",
    "transitions",
]

DEFAULT_BLANK = "_"


class DefinitionError(ValueError):
    """Raised when a machine description cannot become a valid definition."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class Direction(Enum):
    L = "L"
    R = "R"

    @property
    def offset(self):
        return -1 if self is Direction.L else 1


class Transition(NamedTuple):
    next_state: str
    write_symbol: str
    direction: Direction


class TransitionTable:
    """Read-only lookup from (state, symbol) to a Transition."""

    def __init__(self, transitions=None):
        self._transitions = dict(transitions or {})

    def lookup(self, state, symbol):
        return self._transitions.get((state, symbol))

    def items(self):
        return self._transitions.items()

    def keys(self):
        return self._transitions.keys()

    def __contains__(self, key):
        return key in self._transitions

    def __iter__(self):
        return iter(self._transitions)

    def __len__(self):
        return len(self._transitions)

    def __eq__(self, other):
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return self._transitions == other._transitions

    def __hash__(self):
        return hash(frozenset(self._transitions.items()))

    def __repr__(self):
        return f"TransitionTable({len(self._transitions)} transitions)"


# === Invariants ===
def _check_structure(states, alphabet, tape_alphabet, initial_state, accept_states, reject_states, blank_symbol):
    if initial_state not in states:
        raise DefinitionError(f"Initial state {initial_state} not in states", "initial_state")
    if not accept_states <= states:
        raise DefinitionError("Accept states must be subset of states", "accept_states")
    if not reject_states <= states:
        raise DefinitionError("Reject states must be subset of states", "reject_states")
    if accept_states & reject_states:
        raise DefinitionError("Accept and reject states must be disjoint", "reject_states")
    if blank_symbol not in tape_alphabet:
        raise DefinitionError(f"Blank symbol {blank_symbol} not in tape alphabet", "blank_symbol")
    if not alphabet <= tape_alphabet:
        missing = ", ".join(sorted(alphabet - tape_alphabet))
        raise DefinitionError(f"Input symbols not in tape alphabet: {missing}", "tape_alphabet")


def _check_transition(states, tape_alphabet, key, state, symbol, transition):
    if state not in states:
        raise DefinitionError(f"Transition {key} uses undeclared state {state}", "transitions")
    if symbol not in tape_alphabet:
        raise DefinitionError(f"Transition {key} reads symbol {symbol} outside the tape alphabet", "transitions")
    if transition.next_state not in states:
        raise DefinitionError(
            f"Transition {key} moves to undeclared state {transition.next_state}", "transitions"
        )
    if transition.write_symbol not in tape_alphabet:
        raise DefinitionError(
            f"Transition {key} writes symbol {transition.write_symbol} outside the tape alphabet",
            "transitions",
        )


@dataclass(frozen=True)
class MachineDefinition:
    states: frozenset
    alphabet: frozenset
    tape_alphabet: frozenset
    initial_state: str
    accept_states: frozenset
    reject_states: frozenset
    blank_symbol: str
    transitions: TransitionTable

    def __post_init__(self):
        # direct construction must hold the same invariants validate() enforces
        if not isinstance(self.transitions, TransitionTable):
            raise DefinitionError("Field 'transitions' expected a TransitionTable.", "transitions")
        _check_structure(
            self.states, self.alphabet, self.tape_alphabet, self.initial_state,
            self.accept_states, self.reject_states, self.blank_symbol,
        )
        for (state, symbol), transition in self.transitions.items():
            _check_transition(self.states, self.tape_alphabet, f"{state},{symbol}", state, symbol, transition)

    def is_accepting(self, state):
        return state in self.accept_states

    def is_rejecting(self, state):
        return state in self.reject_states

    def to_raw(self):
        """Serialize back to the external JSON shape accepted by validate()."""
        transitions = {}
        for (state, symbol), (next_state, write_symbol, direction) in sorted(
            self.transitions.items(), key=lambda item: item[0]
        ):
            transitions[f"{state},{symbol}"] = [next_state, write_symbol, direction.value]

        return {
            "states": sorted(self.states),
            "alphabet": sorted(self.alphabet),
            "tape_alphabet": sorted(self.tape_alphabet),
            "initial_state": self.initial_state,
            "accept_states": sorted(self.accept_states),
            "reject_states": sorted(self.reject_states),
            "blank_symbol": self.blank_symbol,
            "transitions": transitions,
        }


# === Field Checks ===
def _require_string(raw, field):
    value = raw[field]
    if not isinstance(value, str):
        raise DefinitionError(f"Field '{field}' expected a string, got {type(value).__name__}.", field)
    return value


def _require_string_list(raw, field):
    value = raw[field]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise DefinitionError(f"Field '{field}' expected a list, got {type(value).__name__}.", field)
    for entry in value:
        if not isinstance(entry, str):
            raise DefinitionError(f"Field '{field}' contains a non-string entry: {entry!r}", field)
    return value


def _require_symbols(raw, field, label):
    symbols = _require_string_list(raw, field)
    for entry in symbols:
        if len(entry) != 1:
            raise DefinitionError(f"{label} entry '{entry}' must be a single character", field)
    return frozenset(symbols)


def _parse_transition(key, value):
    parts = key.split(",")
    if len(parts) != 2:
        raise DefinitionError(f"Invalid transition key: {key}", "transitions")
    state, symbol = parts
    if len(symbol) != 1:
        raise DefinitionError(f"Invalid symbol in transition key: {key}", "transitions")

    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise DefinitionError(f"Invalid transition value for key: {key}", "transitions")
    next_state, write_symbol, direction = value
    if not isinstance(next_state, str):
        raise DefinitionError(f"Invalid next state in transition: {key}", "transitions")
    if not isinstance(write_symbol, str) or len(write_symbol) != 1:
        raise DefinitionError(f"Invalid write symbol in transition: {key}", "transitions")
    if direction not in ("L", "R"):
        raise DefinitionError(f"Invalid direction: {direction}", "transitions")

    return (state, symbol), Transition(next_state, write_symbol, Direction(direction))


def validate(raw):
    """
    Turn a parsed machine description into a MachineDefinition.

    raw follows the external JSON shape: states, alphabet, tape_alphabet,
    initial_state, accept_states, reject_states, optional blank_symbol and
    transitions keyed by "state,symbol" with [next_state, write, "L"|"R"].
    The first violated invariant is raised as a DefinitionError.
    """
    if isinstance(raw, MachineDefinition):
        raw = raw.to_raw()
    if not isinstance(raw, dict):
        raise DefinitionError(f"Machine definition must be an object, got {type(raw).__name__}.")

    for field in REQUIRED_FIELDS:
        if field not in raw:
            raise DefinitionError(f"Missing required field: {field}", field)

    states = frozenset(_require_string_list(raw, "states"))
    alphabet = _require_symbols(raw, "alphabet", "Alphabet")
    tape_alphabet = _require_symbols(raw, "tape_alphabet", "Tape alphabet")
    initial_state = _require_string(raw, "initial_state")
    accept_states = frozenset(_require_string_list(raw, "accept_states"))
    reject_states = frozenset(_require_string_list(raw, "reject_states"))

    blank_symbol = raw.get("blank_symbol")
    if blank_symbol is None:
        blank_symbol = DEFAULT_BLANK
    if not isinstance(blank_symbol, str) or len(blank_symbol) != 1:
        raise DefinitionError(f"Blank symbol {blank_symbol!r} must be a single character", "blank_symbol")

    _check_structure(states, alphabet, tape_alphabet, initial_state, accept_states, reject_states, blank_symbol)

    # === Transitions ===
    raw_transitions = raw["transitions"]
    if isinstance(raw_transitions, dict):
        raw_transitions = list(raw_transitions.items())
    elif not isinstance(raw_transitions, (list, tuple)):
        raise DefinitionError("Field 'transitions' expected an object.", "transitions")

    transitions = {}
    for entry in raw_transitions:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2 or not isinstance(entry[0], str):
            raise DefinitionError(f"Invalid transition entry: {entry!r}", "transitions")
        key, value = entry
        (state, symbol), transition = _parse_transition(key, value)
        _check_transition(states, tape_alphabet, key, state, symbol, transition)

        if (state, symbol) in transitions:
            raise DefinitionError(f"Duplicate transition for ({state}, {symbol})", "transitions")

        transitions[(state, symbol)] = transition

    return MachineDefinition(
        states=states,
        alphabet=alphabet,
        tape_alphabet=tape_alphabet,
        initial_state=initial_state,
        accept_states=accept_states,
        reject_states=reject_states,
        blank_symbol=blank_symbol,
        transitions=TransitionTable(transitions),
    )
