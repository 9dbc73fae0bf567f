from dataclasses import asdict, dataclass
from enum import Enum

from simulator.tape import Tape


class InputValidationError(ValueError):
    """Raised when an input string holds a symbol outside the input alphabet."""

    def __init__(self, symbol, position):
        super().__init__(f"Invalid input symbol: {symbol!r} at position {position}")
        self.symbol = symbol
        self.position = position


class Outcome(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DID_NOT_HALT = "did_not_halt"


@dataclass(frozen=True)
class ExecutionResult:
    outcome: Outcome
    final_state: str
    steps: int
    halted: bool
    tape: str = ""

    @property
    def accepted(self):
        return self.outcome is Outcome.ACCEPTED

    def to_dict(self):
        entry = asdict(self)
        entry["outcome"] = self.outcome.value
        return entry


@dataclass(frozen=True)
class TraceStep:
    step: int
    state: str
    head: int
    read_symbol: str
    write_symbol: str
    direction: str
    next_state: str


def check_input(definition, input_string):
    for position, symbol in enumerate(input_string):
        if symbol not in definition.alphabet:
            raise InputValidationError(symbol, position)


class TuringMachine:
    """
    One execution of a MachineDefinition against an input string.

    Owns its Tape and cursor (current state, step count). The definition is
    only read, so the same definition can back any number of executions.
    """

    def __init__(self, definition, input_string="", max_steps=10000, record_history=False):
        if isinstance(max_steps, bool) or not isinstance(max_steps, int) or max_steps <= 0:
            raise ValueError(f"max_steps must be a positive integer, got {max_steps!r}")
        check_input(definition, input_string)

        self.definition = definition
        self.max_steps = max_steps
        self.tape = Tape(definition.blank_symbol, input_string)
        self.current_state = definition.initial_state
        self.steps = 0
        self.history = [] if record_history else None

    def _halting_outcome(self):
        if self.definition.is_accepting(self.current_state):
            return Outcome.ACCEPTED
        if self.definition.is_rejecting(self.current_state):
            return Outcome.REJECTED
        if self.steps >= self.max_steps:
            return Outcome.DID_NOT_HALT
        return None

    def step(self):
        """Apply one transition. Returns the Outcome once the machine has stopped, else None."""
        outcome = self._halting_outcome()
        if outcome is not None:
            return outcome

        symbol = self.tape.read()
        transition = self.definition.transitions.lookup(self.current_state, symbol)
        if transition is None:
            # No transition defined - implicit reject
            return Outcome.REJECTED

        if self.history is not None:
            self.history.append(TraceStep(
                step=self.steps + 1,
                state=self.current_state,
                head=self.tape.head,
                read_symbol=symbol,
                write_symbol=transition.write_symbol,
                direction=transition.direction.value,
                next_state=transition.next_state,
            ))

        self.tape.write(transition.write_symbol)
        self.tape.move(transition.direction)
        self.current_state = transition.next_state
        self.steps += 1
        return None

    def result(self, outcome):
        return ExecutionResult(
            outcome=outcome,
            final_state=self.current_state,
            steps=self.steps,
            halted=outcome is not Outcome.DID_NOT_HALT,
            tape=self.tape.contents(),
        )

    def run(self):
        outcome = self.step()
        while outcome is None:
            outcome = self.step()
        return self.result(outcome)


def run(definition, input_string, max_steps):
    """Execute definition on input_string, stopping after at most max_steps transitions."""
    return TuringMachine(definition, input_string, max_steps).run()


def trace(definition, input_string, max_steps):
    """Like run(), but also returns the TraceStep for every applied transition."""
    machine = TuringMachine(definition, input_string, max_steps, record_history=True)
    result = machine.run()
    return result, machine.history
