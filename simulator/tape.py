class Tape:
    """Unbounded two-way tape stored as a sparse {position: symbol} map."""

    def __init__(self, blank_symbol="_", input_string=""):
        self.blank_symbol = blank_symbol
        self.cells = {pos: symbol for pos, symbol in enumerate(input_string)}
        self.head = 0

    def read(self):
        return self.cells.get(self.head, self.blank_symbol)

    def write(self, symbol):
        self.cells[self.head] = symbol

    def move(self, direction):
        self.head += direction.offset

    def contents(self):
        """Written span of the tape with leading and trailing blanks trimmed."""
        if not self.cells:
            return ""
        span = range(min(self.cells), max(self.cells) + 1)
        text = "".join(self.cells.get(pos, self.blank_symbol) for pos in span)
        return text.strip(self.blank_symbol)

    def __len__(self):
        return len(self.cells)
